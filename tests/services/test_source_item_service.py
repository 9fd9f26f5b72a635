# tests/services/test_source_item_service.py
from decimal import Decimal

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from bundle_sources.domain.source_item import SourceItemValue
from bundle_sources.models.enums import SourceItemStatus
from bundle_sources.services import product_repo, source_item_repo
from bundle_sources.services.errors import (
    BadInputError,
    NotAChildError,
    NotFoundError,
    RejectedAssignmentError,
)
from bundle_sources.services.source_item_service import (
    check_assignment,
    delete_source_items,
    save_source_items,
)

TOGETHER = "bundle-ship-together"
SEPARATELY = "bundle-ship-separately"


def _item(code: str, sku: str, qty: str = "10") -> SourceItemValue:
    return SourceItemValue(source_code=code, sku=sku, quantity=Decimal(qty), status=SourceItemStatus.IN_STOCK)


async def _attach_sku4(session: AsyncSession, bundle_sku: str) -> None:
    opts = await product_repo.list_options(session, bundle_sku)
    await product_repo.add_child(session, bundle_sku, opts[0].id, sku="SKU-4")
    await session.commit()


@pytest.mark.asyncio
async def test_together_rejects_source_missing_on_sibling(session: AsyncSession):
    await _attach_sku4(session, TOGETHER)

    with pytest.raises(RejectedAssignmentError) as ei:
        await save_source_items(session, [_item("eu-1", "SKU-4", "10"), _item("eu-2", "SKU-4", "20")])
    assert str(ei.value) == 'Not able to assign "eu-1" to product "SKU-4"'

    # 整批回滚：eu-2 也不能落库
    got = await source_item_repo.fetch_source_assignments(session, ["SKU-4"])
    assert got == {"SKU-4": set()}


@pytest.mark.asyncio
async def test_together_allows_source_held_by_all_siblings(session: AsyncSession):
    await _attach_sku4(session, TOGETHER)

    n = await save_source_items(session, [_item("eu-2", "SKU-4", "20")])
    assert n == 1

    res = await source_item_repo.search_source_items(session, sku="SKU-4")
    assert res["total_count"] == 1
    it = res["items"][0]
    assert (it.source_code, it.sku, it.quantity, it.status) == (
        "eu-2",
        "SKU-4",
        Decimal("20"),
        SourceItemStatus.IN_STOCK,
    )


@pytest.mark.asyncio
async def test_separately_allows_any_sources(session: AsyncSession):
    await _attach_sku4(session, SEPARATELY)

    n = await save_source_items(session, [_item("eu-1", "SKU-4", "10"), _item("eu-2", "SKU-4", "20")])
    assert n == 2

    got = await source_item_repo.fetch_source_assignments(session, ["SKU-4"])
    assert got["SKU-4"] == {"eu-1", "eu-2"}


@pytest.mark.asyncio
async def test_existing_assignment_is_idempotent_for_together(session: AsyncSession):
    # SKU-1 已有 eu-1（SKU-3 没有），重复保存只更新数量，不触发拒绝
    n = await save_source_items(session, [_item("eu-1", "SKU-1", "42")])
    assert n == 1

    res = await source_item_repo.search_source_items(session, sku="SKU-1", source_code="eu-1")
    assert res["total_count"] == 1
    assert res["items"][0].quantity == Decimal("42")


@pytest.mark.asyncio
async def test_new_source_on_existing_child_is_checked(session: AsyncSession):
    # SKU-3 加 eu-1：兄弟 SKU-1 有 eu-1 → together / separately 都放行
    await save_source_items(session, [_item("eu-1", "SKU-3")])

    # SKU-1 加 eu-3：兄弟 SKU-3 没有 eu-3 → together 拒绝
    with pytest.raises(RejectedAssignmentError) as ei:
        await save_source_items(session, [_item("eu-3", "SKU-1")])
    assert (ei.value.source_code, ei.value.sku) == ("eu-3", "SKU-1")


@pytest.mark.asyncio
async def test_sku_outside_any_bundle_is_unconstrained(session: AsyncSession):
    n = await save_source_items(session, [_item("eu-3", "SKU-2"), _item("eu-1", "SKU-2")])
    assert n == 2


@pytest.mark.asyncio
async def test_save_rejects_unknown_source_and_product(session: AsyncSession):
    with pytest.raises(BadInputError) as ei:
        await save_source_items(session, [_item("nope", "SKU-2"), _item("eu-1", "SKU-404")])
    paths = [d["path"] for d in ei.value.details]
    assert paths == ["source_items[0].source_code", "source_items[1].sku"]


@pytest.mark.asyncio
async def test_save_rejects_bundle_sku_and_duplicates(session: AsyncSession):
    with pytest.raises(BadInputError):
        await save_source_items(session, [_item("eu-1", TOGETHER)])

    with pytest.raises(BadInputError) as ei:
        await save_source_items(session, [_item("eu-1", "SKU-2"), _item("eu-1", "SKU-2")])
    assert ei.value.details[0]["path"] == "source_items[1]"


@pytest.mark.asyncio
async def test_delete_is_idempotent(session: AsyncSession):
    items = [_item("eu-1", "SKU-1"), _item("eu-2", "SKU-1")]
    assert await delete_source_items(session, items) == 2
    assert await delete_source_items(session, items) == 0

    got = await source_item_repo.fetch_source_assignments(session, ["SKU-1"])
    assert got == {"SKU-1": set()}


@pytest.mark.asyncio
async def test_check_assignment_is_dry_run(session: AsyncSession):
    await _attach_sku4(session, TOGETHER)

    res = await check_assignment(session, TOGETHER, "SKU-4", ["eu-1", "eu-2"])
    assert not res.allowed
    assert res.message == 'Not able to assign "eu-1" to product "SKU-4"'

    res = await check_assignment(session, TOGETHER, "SKU-4", ["eu-2"])
    assert res.allowed

    got = await source_item_repo.fetch_source_assignments(session, ["SKU-4"])
    assert got == {"SKU-4": set()}


@pytest.mark.asyncio
async def test_check_assignment_errors(session: AsyncSession):
    with pytest.raises(NotAChildError):
        await check_assignment(session, TOGETHER, "SKU-2", ["eu-1"])

    with pytest.raises(NotFoundError):
        await check_assignment(session, "no-such-bundle", "SKU-1", ["eu-1"])

    # simple 商品不是 bundle
    with pytest.raises(NotFoundError):
        await check_assignment(session, "SKU-1", "SKU-1", ["eu-1"])


@pytest.mark.asyncio
async def test_save_locks_every_bundle_once_in_sku_order(session: AsyncSession, monkeypatch):
    calls: list[tuple] = []
    real_lock = product_repo.lock_bundle_rows
    real_fetch = product_repo.fetch_bundle_product

    async def _lock(sess, skus):
        skus = list(skus)
        calls.append(("lock", sorted(set(skus))))
        await real_lock(sess, skus)

    async def _fetch(sess, sku):
        calls.append(("fetch", sku))
        return await real_fetch(sess, sku)

    monkeypatch.setattr(product_repo, "lock_bundle_rows", _lock)
    monkeypatch.setattr(product_repo, "fetch_bundle_product", _fetch)

    # SKU-3 两个组合品都有；SKU-2 不在任何组合品里
    n = await save_source_items(session, [_item("eu-3", "SKU-2"), _item("eu-1", "SKU-3")])
    assert n == 2

    locks = [c for c in calls if c[0] == "lock"]
    assert locks == [("lock", [SEPARATELY, TOGETHER])]
    # 加锁发生在任何校验读取之前
    assert calls[0][0] == "lock"
    assert {c[1] for c in calls[1:]} == {SEPARATELY, TOGETHER}
