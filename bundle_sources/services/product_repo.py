# bundle_sources/services/product_repo.py
from __future__ import annotations

import logging
from decimal import Decimal
from typing import Iterable, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from bundle_sources.domain.bundle import BundleLinkValue, BundleOptionValue, BundleProduct
from bundle_sources.models.bundle import BundleLink, BundleOption
from bundle_sources.models.enums import PriceType, ProductType, ShipmentType
from bundle_sources.models.product import Product
from bundle_sources.services.errors import BadInputError, ConflictError, NotFoundError

log = logging.getLogger("bundle_sources.product_repo")


async def find_product(session: AsyncSession, sku: str) -> Optional[Product]:
    return (await session.execute(select(Product).where(Product.sku == sku))).scalars().first()


async def get_product(session: AsyncSession, sku: str) -> Product:
    obj = await find_product(session, sku)
    if obj is None:
        raise NotFoundError(f'The product "{sku}" does not exist')
    return obj


async def create_product(
    session: AsyncSession,
    *,
    sku: str,
    name: str,
    type_id: ProductType = ProductType.SIMPLE,
    shipment_type: Optional[ShipmentType] = None,
) -> Product:
    sku = sku.strip()
    if not sku:
        raise BadInputError(
            "sku must not be blank",
            details=[{"type": "validation", "path": "sku", "reason": "不能为空"}],
        )
    if await find_product(session, sku) is not None:
        raise ConflictError(f'The product "{sku}" already exists')

    if type_id == ProductType.BUNDLE:
        shipment = ShipmentType(shipment_type or ShipmentType.TOGETHER)
    elif shipment_type is not None:
        raise BadInputError(
            "shipment_type applies to bundle products only",
            details=[{"type": "validation", "path": "shipment_type", "reason": "仅 bundle 可设置"}],
        )
    else:
        shipment = None

    obj = Product(
        sku=sku,
        name=name.strip(),
        type_id=str(type_id),
        shipment_type=str(shipment) if shipment is not None else None,
    )
    session.add(obj)
    try:
        await session.flush()
    except IntegrityError:
        # 并发下另一请求先提交了同一 sku
        await session.rollback()
        raise ConflictError(f'The product "{sku}" already exists')
    return obj


async def _get_bundle_row(session: AsyncSession, sku: str) -> Product:
    stmt = select(Product).where(Product.sku == sku).execution_options(populate_existing=True)
    obj = (await session.execute(stmt)).scalars().first()
    if obj is None or obj.type_id != ProductType.BUNDLE:
        raise NotFoundError(f'The bundle product "{sku}" does not exist')
    return obj


def to_bundle_product(obj: Product) -> BundleProduct:
    return BundleProduct(
        sku=obj.sku,
        shipment_type=ShipmentType(obj.shipment_type or ShipmentType.TOGETHER),
        options=tuple(
            BundleOptionValue(
                option_id=opt.id,
                title=opt.title,
                children=tuple(
                    BundleLinkValue(
                        sku=ln.sku,
                        qty=Decimal(ln.qty),
                        price=Decimal(ln.price),
                        position=int(ln.position),
                        is_default=bool(ln.is_default),
                        can_change_quantity=bool(ln.can_change_quantity),
                    )
                    for ln in opt.links
                ),
            )
            for opt in obj.options
        ),
    )


async def fetch_bundle_product(session: AsyncSession, sku: str) -> BundleProduct:
    """按 sku 读取组合品（含 option / 子商品链接）；不存在或非 bundle → NotFoundError。"""
    return to_bundle_product(await _get_bundle_row(session, sku))


async def create_option(
    session: AsyncSession,
    bundle_sku: str,
    *,
    title: str,
    type: str = "select",
    required: bool = True,
    position: int = 0,
) -> BundleOption:
    parent = await _get_bundle_row(session, bundle_sku)
    opt = BundleOption(title=title.strip(), type=type, required=required, position=position)
    parent.options.append(opt)
    await session.flush()
    return opt


async def list_options(session: AsyncSession, bundle_sku: str) -> list[BundleOption]:
    parent = await _get_bundle_row(session, bundle_sku)
    return list(parent.options)


def _find_option(parent: Product, option_id: int) -> BundleOption:
    for opt in parent.options:
        if opt.id == option_id:
            return opt
    raise NotFoundError(f'The option "{option_id}" does not exist in bundle product "{parent.sku}"')


async def add_child(
    session: AsyncSession,
    bundle_sku: str,
    option_id: int,
    *,
    sku: str,
    qty: Decimal = Decimal("1"),
    price: Decimal = Decimal("0"),
    price_type: PriceType = PriceType.FIXED,
    position: int = 0,
    is_default: bool = False,
    can_change_quantity: bool = False,
) -> int:
    """给组合品的 option 挂一个子商品，返回 link id。"""
    parent = await _get_bundle_row(session, bundle_sku)
    opt = _find_option(parent, option_id)

    child = await get_product(session, sku)
    if child.type_id == ProductType.BUNDLE:
        raise BadInputError(
            "Bundle product could not contain another composite product",
            details=[{"type": "validation", "path": "linked_product.sku", "reason": sku}],
        )

    if any(ln.sku == sku for ln in opt.links):
        raise ConflictError(f'Child with specified sku "{sku}" already assigned to product "{bundle_sku}"')

    link = BundleLink(
        sku=sku,
        qty=qty,
        price=price,
        price_type=int(price_type),
        position=position,
        is_default=is_default,
        can_change_quantity=can_change_quantity,
    )
    opt.links.append(link)
    try:
        await session.flush()
    except IntegrityError:
        await session.rollback()
        raise ConflictError(f'Child with specified sku "{sku}" already assigned to product "{bundle_sku}"')

    log.info("bundle child added: bundle=%s option=%s child=%s link=%s", bundle_sku, option_id, sku, link.id)
    return int(link.id)


async def remove_child(session: AsyncSession, bundle_sku: str, option_id: int, sku: str) -> bool:
    parent = await _get_bundle_row(session, bundle_sku)
    opt = _find_option(parent, option_id)

    for ln in opt.links:
        if ln.sku == sku:
            opt.links.remove(ln)
            await session.flush()
            log.info("bundle child removed: bundle=%s option=%s child=%s", bundle_sku, option_id, sku)
            return True

    raise NotFoundError(f'Requested bundle option "{option_id}" has no child "{sku}"')


async def bundles_containing_child(session: AsyncSession, sku: str) -> list[str]:
    """返回所有把 sku 作为子商品的组合品 sku（去重、按 sku 排序）。"""
    stmt = (
        select(Product.sku)
        .join(BundleOption, BundleOption.parent_id == Product.id)
        .join(BundleLink, BundleLink.option_id == BundleOption.id)
        .where(BundleLink.sku == sku, Product.type_id == str(ProductType.BUNDLE))
        .distinct()
        .order_by(Product.sku)
    )
    return list((await session.execute(stmt)).scalars().all())


async def lock_bundle_rows(session: AsyncSession, skus: Iterable[str]) -> None:
    """
    一次性按 sku 升序锁住一批组合品行（PG: SELECT ... ORDER BY sku FOR UPDATE）。
    同一批 source item 涉及的组合品必须在校验前统一加锁，加锁顺序全局一致才不会死锁。
    """
    wanted = sorted(set(skus))
    if not wanted:
        return
    stmt = (
        select(Product.id)
        .where(Product.sku.in_(wanted), Product.type_id == str(ProductType.BUNDLE))
        .order_by(Product.sku)
        .with_for_update()
    )
    await session.execute(stmt)
