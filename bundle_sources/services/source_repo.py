# bundle_sources/services/source_repo.py
from __future__ import annotations

from typing import Iterable, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from bundle_sources.models.source import Source
from bundle_sources.services.errors import BadInputError, ConflictError


async def find_source(session: AsyncSession, source_code: str) -> Optional[Source]:
    return (
        await session.execute(select(Source).where(Source.source_code == source_code))
    ).scalars().first()


async def create_source(
    session: AsyncSession, *, source_code: str, name: str, enabled: bool = True
) -> Source:
    code = source_code.strip()
    if not code:
        raise BadInputError(
            "source_code must not be blank",
            details=[{"type": "validation", "path": "source_code", "reason": "不能为空"}],
        )
    if await find_source(session, code) is not None:
        raise ConflictError(f'The source "{code}" already exists')

    obj = Source(source_code=code, name=name.strip(), enabled=enabled)
    session.add(obj)
    try:
        await session.flush()
    except IntegrityError:
        await session.rollback()
        raise ConflictError(f'The source "{code}" already exists')
    return obj


async def list_sources(session: AsyncSession) -> list[Source]:
    rows = await session.execute(select(Source).order_by(Source.source_code))
    return list(rows.scalars().all())


async def existing_source_codes(session: AsyncSession, codes: Iterable[str]) -> set[str]:
    wanted = sorted(set(codes))
    if not wanted:
        return set()
    rows = await session.execute(select(Source.source_code).where(Source.source_code.in_(wanted)))
    return set(rows.scalars().all())
