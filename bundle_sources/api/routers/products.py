# bundle_sources/api/routers/products.py
from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from bundle_sources.api.deps import get_session
from bundle_sources.api.problem import problem_from_error
from bundle_sources.api.schemas.catalog import BundleOptionOut, ProductCreateIn, ProductOut
from bundle_sources.models.enums import ProductType
from bundle_sources.models.product import Product
from bundle_sources.services import product_repo
from bundle_sources.services.errors import BundleSourceError

router = APIRouter(prefix="/products", tags=["catalog - products"])


def to_product_out(obj: Product) -> ProductOut:
    out = ProductOut(
        id=obj.id,
        sku=obj.sku,
        name=obj.name,
        type_id=obj.type_id,
        shipment_type=obj.shipment_type,
    )
    # ✅ bundle 直接带出 option + 子商品（显式字段，不走扩展属性袋）
    if obj.type_id == ProductType.BUNDLE:
        out.bundle_product_options = [BundleOptionOut.model_validate(o) for o in obj.options]
    return out


@router.post("", response_model=ProductOut, status_code=status.HTTP_201_CREATED)
async def create_product(
    payload: ProductCreateIn,
    session: AsyncSession = Depends(get_session),
) -> ProductOut:
    try:
        obj = await product_repo.create_product(
            session,
            sku=payload.sku,
            name=payload.name,
            type_id=payload.type_id,
            shipment_type=payload.shipment_type,
        )
        await session.commit()
    except BundleSourceError as e:
        raise problem_from_error(e, context={"sku": payload.sku}) from e

    # 新建 bundle 还没有 option；这里不触发懒加载
    return ProductOut(
        id=obj.id,
        sku=obj.sku,
        name=obj.name,
        type_id=obj.type_id,
        shipment_type=obj.shipment_type,
        bundle_product_options=[] if obj.type_id == ProductType.BUNDLE else None,
    )


@router.get("/{sku}", response_model=ProductOut)
async def get_product(sku: str, session: AsyncSession = Depends(get_session)) -> ProductOut:
    try:
        obj = await product_repo.get_product(session, sku)
    except BundleSourceError as e:
        raise problem_from_error(e, context={"sku": sku}) from e
    return to_product_out(obj)
