# bundle_sources/api/routers/source_items.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from bundle_sources.api.deps import get_session
from bundle_sources.api.problem import problem_from_error
from bundle_sources.api.schemas.source_item import (
    SourceItemOut,
    SourceItemSearchOut,
    SourceItemsIn,
    SourceItemsWriteOut,
)
from bundle_sources.services import source_item_repo, source_item_service
from bundle_sources.services.errors import BundleSourceError

router = APIRouter(prefix="/inventory", tags=["inventory - source items"])


@router.post("/source-items", response_model=SourceItemsWriteOut)
async def save_source_items(
    payload: SourceItemsIn,
    session: AsyncSession = Depends(get_session),
) -> SourceItemsWriteOut:
    items = [it.to_value() for it in payload.source_items]
    try:
        n = await source_item_service.save_source_items(session, items)
    except BundleSourceError as e:
        raise problem_from_error(e, context={"skus": sorted({it.sku for it in items})}) from e
    return SourceItemsWriteOut(ok=True, count=n)


@router.post("/source-items-delete", response_model=SourceItemsWriteOut)
async def delete_source_items(
    payload: SourceItemsIn,
    session: AsyncSession = Depends(get_session),
) -> SourceItemsWriteOut:
    n = await source_item_service.delete_source_items(
        session, [it.to_value() for it in payload.source_items]
    )
    return SourceItemsWriteOut(ok=True, count=n)


@router.get("/source-items", response_model=SourceItemSearchOut)
async def search_source_items(
    sku: Optional[str] = Query(None, description="按 sku 等值过滤"),
    source_code: Optional[str] = Query(None, description="按 source_code 等值过滤"),
    status: Optional[int] = Query(None, ge=0, le=1, description="1 有货 / 0 缺货"),
    page_size: int = Query(20, ge=1, le=200),
    current_page: int = Query(1, ge=1),
    session: AsyncSession = Depends(get_session),
) -> SourceItemSearchOut:
    res = await source_item_repo.search_source_items(
        session,
        sku=sku,
        source_code=source_code,
        status=status,
        page_size=page_size,
        current_page=current_page,
    )
    return SourceItemSearchOut(
        items=[SourceItemOut.from_value(v) for v in res["items"]],
        total_count=res["total_count"],
        search_criteria=res["search_criteria"],
    )
