# bundle_sources/services/source_item_service.py
"""
source item 写入编排：

  1) 批内校验：(source_code, sku) 不重复；source 存在；sku 存在且不是 bundle
  2) 同一事务内：收集本批所有 sku 所在的组合品，按 sku 升序一次性锁行；
     再逐个读全部子商品已提交的分配 → 跑 validate_assignment
  3) 全部放行才落库；任一拒绝 → RejectedAssignmentError，整批回滚
"""
from __future__ import annotations

import logging
from collections import OrderedDict
from typing import Iterable, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from bundle_sources.core.tx import tx_commit
from bundle_sources.domain.source_item import SourceItemValue
from bundle_sources.models.enums import ProductType
from bundle_sources.models.product import Product
from bundle_sources.obs.metrics import (
    source_assignment_checks_total,
    source_items_deleted_total,
    source_items_saved_total,
)
from bundle_sources.services import product_repo, source_item_repo, source_repo
from bundle_sources.services.errors import BadInputError
from bundle_sources.services.source_assignment_validator import (
    AssignmentResult,
    validate_assignment,
)

log = logging.getLogger("bundle_sources.source_items")


def _check_batch_shape(items: Sequence[SourceItemValue]) -> None:
    details = []
    seen: set[tuple[str, str]] = set()
    for i, it in enumerate(items):
        if it.key in seen:
            details.append(
                {"type": "validation", "path": f"source_items[{i}]", "reason": "重复的 source_code + sku"}
            )
        seen.add(it.key)
    if details:
        raise BadInputError("Duplicate source items in request", details=details)


async def _check_references(session: AsyncSession, items: Sequence[SourceItemValue]) -> None:
    details = []

    known_sources = await source_repo.existing_source_codes(session, (it.source_code for it in items))
    skus = sorted({it.sku for it in items})
    rows = await session.execute(select(Product.sku, Product.type_id).where(Product.sku.in_(skus)))
    types = {sku: type_id for sku, type_id in rows.all()}

    for i, it in enumerate(items):
        if it.source_code not in known_sources:
            details.append(
                {"type": "validation", "path": f"source_items[{i}].source_code", "reason": f'source "{it.source_code}" not found'}
            )
        if it.sku not in types:
            details.append(
                {"type": "validation", "path": f"source_items[{i}].sku", "reason": f'product "{it.sku}" not found'}
            )
        elif types[it.sku] == ProductType.BUNDLE:
            details.append(
                {"type": "validation", "path": f"source_items[{i}].sku", "reason": "bundle product cannot hold source items"}
            )

    if details:
        raise BadInputError("Source items validation failed", details=details)


def _new_codes_by_sku(items: Sequence[SourceItemValue]) -> "OrderedDict[str, list[str]]":
    out: "OrderedDict[str, list[str]]" = OrderedDict()
    for it in items:
        out.setdefault(it.sku, []).append(it.source_code)
    return out


async def _validate_child(
    session: AsyncSession,
    bundle_sku: str,
    sku: str,
    codes: Iterable[str],
) -> AssignmentResult:
    bundle = await product_repo.fetch_bundle_product(session, bundle_sku)
    assignments = await source_item_repo.fetch_source_assignments(
        session, [sku, *bundle.iter_child_skus()]
    )
    requested = [*codes, *sorted(assignments.get(sku, set()))]
    res = validate_assignment(bundle, sku, requested, assignments)

    source_assignment_checks_total.labels(
        str(bundle.shipment_type), "allowed" if res.allowed else "rejected"
    ).inc()
    if not res.allowed:
        log.info(
            "source assignment rejected: bundle=%s sku=%s source=%s shipment=%s",
            bundle.sku,
            sku,
            res.source_code,
            bundle.shipment_type,
        )
    return res


async def save_source_items(session: AsyncSession, items: Sequence[SourceItemValue]) -> int:
    """批量保存 source item（先校验后落库，同一事务）；返回写入条数。"""
    items = list(items)
    if not items:
        return 0

    _check_batch_shape(items)

    async with tx_commit(session):
        await _check_references(session, items)

        plan = [
            (sku, codes, await product_repo.bundles_containing_child(session, sku))
            for sku, codes in _new_codes_by_sku(items).items()
        ]
        # 先统一按 sku 升序锁住本批涉及的全部组合品，再逐个校验
        await product_repo.lock_bundle_rows(
            session, (b for _sku, _codes, bundles in plan for b in bundles)
        )

        for sku, codes, bundles in plan:
            for bundle_sku in bundles:
                res = await _validate_child(session, bundle_sku, sku, codes)
                res.raise_for_rejection()

        n = await source_item_repo.persist_source_items(session, items)

    source_items_saved_total.inc(n)
    log.info("source items saved: n=%d skus=%s", n, sorted({it.sku for it in items}))
    return n


async def delete_source_items(session: AsyncSession, items: Sequence[SourceItemValue]) -> int:
    items = list(items)
    if not items:
        return 0

    async with tx_commit(session):
        n = await source_item_repo.delete_source_items(session, items)

    source_items_deleted_total.inc(n)
    log.info("source items deleted: n=%d", n)
    return n


async def check_assignment(
    session: AsyncSession, bundle_sku: str, sku: str, source_codes: Sequence[str]
) -> AssignmentResult:
    """只校验不落库（dry-run）：基于当前已提交的分配。"""
    return await _validate_child(session, bundle_sku, sku, source_codes)
