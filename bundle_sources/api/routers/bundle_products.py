# bundle_sources/api/routers/bundle_products.py
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.ext.asyncio import AsyncSession

from bundle_sources.api.deps import get_session
from bundle_sources.api.problem import problem_from_error
from bundle_sources.api.schemas.catalog import (
    AddChildIn,
    BundleOptionCreateIn,
    BundleOptionCreateOut,
    BundleOptionOut,
)
from bundle_sources.api.schemas.source_item import AssignmentCheckIn, AssignmentCheckOut
from bundle_sources.services import product_repo
from bundle_sources.services.errors import BundleSourceError
from bundle_sources.services.source_item_service import check_assignment

router = APIRouter(prefix="/bundle-products", tags=["catalog - bundle products"])


@router.post(
    "/{sku}/options",
    response_model=BundleOptionCreateOut,
    status_code=status.HTTP_201_CREATED,
)
async def create_option(
    payload: BundleOptionCreateIn,
    sku: str = Path(..., min_length=1),
    session: AsyncSession = Depends(get_session),
) -> BundleOptionCreateOut:
    try:
        opt = await product_repo.create_option(
            session,
            sku,
            title=payload.title,
            type=payload.type,
            required=payload.required,
            position=payload.position,
        )
        option_id = int(opt.id)
        await session.commit()
    except BundleSourceError as e:
        raise problem_from_error(e, context={"sku": sku}) from e
    return BundleOptionCreateOut(option_id=option_id)


@router.get("/{sku}/options", response_model=List[BundleOptionOut])
async def list_options(
    sku: str = Path(..., min_length=1),
    session: AsyncSession = Depends(get_session),
) -> List[BundleOptionOut]:
    try:
        opts = await product_repo.list_options(session, sku)
    except BundleSourceError as e:
        raise problem_from_error(e, context={"sku": sku}) from e
    return [BundleOptionOut.model_validate(o) for o in opts]


@router.post("/{sku}/links/{option_id}", response_model=int)
async def add_child(
    payload: AddChildIn,
    sku: str = Path(..., min_length=1),
    option_id: int = Path(..., ge=1),
    session: AsyncSession = Depends(get_session),
) -> int:
    lp = payload.linked_product
    try:
        link_id = await product_repo.add_child(
            session,
            sku,
            option_id,
            sku=lp.sku,
            qty=lp.qty,
            price=lp.price,
            price_type=lp.price_type,
            position=lp.position,
            is_default=lp.is_default,
            can_change_quantity=lp.can_change_quantity,
        )
        await session.commit()
    except BundleSourceError as e:
        raise problem_from_error(e, context={"sku": sku, "option_id": option_id}) from e
    return link_id


@router.delete("/{sku}/options/{option_id}/children/{child_sku}", response_model=bool)
async def remove_child(
    sku: str = Path(..., min_length=1),
    option_id: int = Path(..., ge=1),
    child_sku: str = Path(..., min_length=1),
    session: AsyncSession = Depends(get_session),
) -> bool:
    try:
        ok = await product_repo.remove_child(session, sku, option_id, child_sku)
        await session.commit()
    except BundleSourceError as e:
        raise problem_from_error(
            e, context={"sku": sku, "option_id": option_id, "child_sku": child_sku}
        ) from e
    return ok


@router.post("/{sku}/source-assignments/check", response_model=AssignmentCheckOut)
async def check_source_assignment(
    payload: AssignmentCheckIn,
    sku: str = Path(..., min_length=1),
    session: AsyncSession = Depends(get_session),
) -> AssignmentCheckOut:
    """dry-run：只回答“能不能分配”，不写 source item。"""
    try:
        res = await check_assignment(session, sku, payload.sku, payload.source_codes)
    except BundleSourceError as e:
        raise problem_from_error(e, context={"sku": sku, "child_sku": payload.sku}) from e
    return AssignmentCheckOut(
        allowed=res.allowed,
        sku=payload.sku,
        source_code=res.source_code,
        message=res.message,
    )
