# bundle_sources/core/tx.py
from __future__ import annotations

from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncSession


@asynccontextmanager
async def tx_commit(session: AsyncSession):
    """
    Commit 事务：正常 begin/commit，异常回滚。
    session 上已有进行中的事务时降级为保存点，由外层负责最终提交。
    """
    if session.in_transaction():
        async with session.begin_nested():
            yield
    else:
        async with session.begin():
            yield
