# bundle_sources/db/schema.py
from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine

from bundle_sources.db.base import Base, init_models


async def create_all(engine: AsyncEngine) -> None:
    """按 ORM 元数据建表（dev / 测试用；正式环境走 alembic upgrade head）。"""
    init_models()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def drop_all(engine: AsyncEngine) -> None:
    init_models()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
