# bundle_sources/api/routers/sources.py
from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from bundle_sources.api.deps import get_session
from bundle_sources.api.problem import problem_from_error
from bundle_sources.api.schemas.catalog import SourceCreateIn, SourceListOut, SourceOut
from bundle_sources.services import source_repo
from bundle_sources.services.errors import BundleSourceError

router = APIRouter(prefix="/inventory/sources", tags=["inventory - sources"])


@router.post("", response_model=SourceOut, status_code=status.HTTP_201_CREATED)
async def create_source(
    payload: SourceCreateIn,
    session: AsyncSession = Depends(get_session),
) -> SourceOut:
    try:
        obj = await source_repo.create_source(
            session, source_code=payload.source_code, name=payload.name, enabled=payload.enabled
        )
        await session.commit()
    except BundleSourceError as e:
        raise problem_from_error(e, context={"source_code": payload.source_code}) from e
    return SourceOut.model_validate(obj)


@router.get("", response_model=SourceListOut)
async def list_sources(session: AsyncSession = Depends(get_session)) -> SourceListOut:
    rows = await source_repo.list_sources(session)
    return SourceListOut(ok=True, data=[SourceOut.model_validate(r) for r in rows])
