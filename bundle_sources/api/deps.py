# bundle_sources/api/deps.py
from __future__ import annotations

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

from bundle_sources.db.session import get_session as _get_session


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI 依赖：每个请求一个 AsyncSession。
    测试里通过 app.dependency_overrides[get_session] 换成临时库。
    """
    async for session in _get_session():
        yield session
