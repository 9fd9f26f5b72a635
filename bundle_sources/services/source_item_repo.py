# bundle_sources/services/source_item_repo.py
from __future__ import annotations

from collections import defaultdict
from decimal import Decimal
from typing import Any, Dict, Iterable, Optional, Sequence

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from bundle_sources.domain.source_item import SourceItemValue
from bundle_sources.models.enums import SourceItemStatus
from bundle_sources.models.source_item import SourceItem
from bundle_sources.services.errors import ConflictError


async def fetch_source_assignments(session: AsyncSession, skus: Iterable[str]) -> dict[str, set[str]]:
    """
    读取 sku → 已分配 source_code 集合（只看行是否存在，不看 quantity / status）。
    没有任何 source item 的 sku 也会以空集合出现在结果里。
    """
    wanted = sorted(set(skus))
    out: dict[str, set[str]] = {s: set() for s in wanted}
    if not wanted:
        return out

    rows = await session.execute(
        select(SourceItem.sku, SourceItem.source_code).where(SourceItem.sku.in_(wanted))
    )
    for sku, code in rows.all():
        out[sku].add(code)
    return out


async def persist_source_items(session: AsyncSession, items: Sequence[SourceItemValue]) -> int:
    """按 (source_code, sku) 批量 upsert；返回写入行数。"""
    if not items:
        return 0

    skus = sorted({it.sku for it in items})
    existing = (
        await session.execute(select(SourceItem).where(SourceItem.sku.in_(skus)))
    ).scalars().all()
    by_key = {(r.source_code, r.sku): r for r in existing}

    for it in items:
        row = by_key.get(it.key)
        if row is None:
            row = SourceItem(source_code=it.source_code, sku=it.sku)
            session.add(row)
            by_key[it.key] = row
        row.quantity = Decimal(it.quantity)
        row.status = int(it.status)

    # 外层 tx_commit 负责回滚
    try:
        await session.flush()
    except IntegrityError as e:
        raise ConflictError("Source items were changed concurrently, please retry") from e
    return len(items)


async def delete_source_items(session: AsyncSession, items: Sequence[SourceItemValue]) -> int:
    """按 (source_code, sku) 批量删除；不存在的行直接忽略（清理可重复执行）。"""
    by_sku: dict[str, set[str]] = defaultdict(set)
    for it in items:
        by_sku[it.sku].add(it.source_code)

    deleted = 0
    for sku, codes in sorted(by_sku.items()):
        res = await session.execute(
            delete(SourceItem).where(SourceItem.sku == sku, SourceItem.source_code.in_(sorted(codes)))
        )
        deleted += int(res.rowcount or 0)
    return deleted


async def search_source_items(
    session: AsyncSession,
    *,
    sku: Optional[str] = None,
    source_code: Optional[str] = None,
    status: Optional[int] = None,
    page_size: int = 20,
    current_page: int = 1,
) -> Dict[str, Any]:
    """等值过滤（AND）+ 分页；按 (sku, source_code) 排序。"""
    conds = []
    filters: list[dict[str, Any]] = []
    if sku is not None:
        conds.append(SourceItem.sku == sku)
        filters.append({"field": "sku", "value": sku, "condition_type": "eq"})
    if source_code is not None:
        conds.append(SourceItem.source_code == source_code)
        filters.append({"field": "source_code", "value": source_code, "condition_type": "eq"})
    if status is not None:
        conds.append(SourceItem.status == int(status))
        filters.append({"field": "status", "value": int(status), "condition_type": "eq"})

    total = int(
        (await session.scalar(select(func.count()).select_from(SourceItem).where(*conds))) or 0
    )

    stmt = (
        select(SourceItem)
        .where(*conds)
        .order_by(SourceItem.sku, SourceItem.source_code)
        .limit(page_size)
        .offset((current_page - 1) * page_size)
    )
    rows = (await session.execute(stmt)).scalars().all()

    return {
        "items": [
            SourceItemValue(
                source_code=r.source_code,
                sku=r.sku,
                quantity=Decimal(r.quantity),
                status=SourceItemStatus(int(r.status)),
            )
            for r in rows
        ],
        "total_count": total,
        "search_criteria": {
            "filters": filters,
            "page_size": page_size,
            "current_page": current_page,
        },
    }
