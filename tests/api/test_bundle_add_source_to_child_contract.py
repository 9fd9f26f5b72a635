# tests/api/test_bundle_add_source_to_child_contract.py
"""
组合品子商品加 source 的规则合同：

- together：新 source 只有在其他子商品都已分配时才能加给某个子商品
- separately：子商品之间不互相约束
"""
from __future__ import annotations

from typing import Any, Dict, List

import pytest

from tests._problem import assert_problem_shape

SOURCE_ITEMS: List[Dict[str, Any]] = [
    {"source_code": "eu-1", "sku": "SKU-4", "quantity": 10, "status": 1},
    {"source_code": "eu-2", "sku": "SKU-4", "quantity": 20, "status": 1},
]


async def _first_option_id(client, bundle_sku: str) -> int:
    r = await client.get(f"/products/{bundle_sku}")
    assert r.status_code == 200, r.text
    options = r.json()["bundle_product_options"]
    assert options
    return int(options[0]["option_id"])


async def _add_child(client, bundle_sku: str, option_id: int, child_sku: str) -> int:
    r = await client.post(
        f"/bundle-products/{bundle_sku}/links/{option_id}",
        json={
            "linked_product": {
                "sku": child_sku,
                "option_id": option_id,
                "qty": 1,
                "position": 1,
                "price_type": 2,
                "price": 10,
                "is_default": True,
                "can_change_quantity": False,
            }
        },
    )
    assert r.status_code == 200, r.text
    return r.json()


async def _add_source_items(client, items: List[Dict[str, Any]]):
    return await client.post("/inventory/source-items", json={"source_items": items})


async def _delete_source_items(client, items: List[Dict[str, Any]]) -> None:
    r = await client.post("/inventory/source-items-delete", json={"source_items": items})
    assert r.status_code == 200, r.text


async def _get_source_items(client, sku: str) -> Dict[str, Any]:
    r = await client.get("/inventory/source-items", params={"sku": sku, "page_size": 10})
    assert r.status_code == 200, r.text
    return r.json()


@pytest.mark.asyncio
async def test_add_source_to_child_ship_together_multiple_sources_rejected(client):
    option_id = await _first_option_id(client, "bundle-ship-together")
    try:
        assert await _add_child(client, "bundle-ship-together", option_id, "SKU-4") is not None

        r = await _add_source_items(client, SOURCE_ITEMS)
        assert r.status_code == 422, r.text
        body = r.json()
        assert_problem_shape(body)
        assert body["error_code"] == "source_assignment_rejected"
        assert body["message"] == 'Not able to assign "eu-1" to product "SKU-4"'
        assert body["details"][0]["source_code"] == "eu-1"
        assert body["details"][0]["sku"] == "SKU-4"

        data = await _get_source_items(client, "SKU-4")
        assert data["total_count"] == 0
    finally:
        await _delete_source_items(client, SOURCE_ITEMS)


@pytest.mark.asyncio
async def test_add_source_to_child_ship_together_single_source(client):
    option_id = await _first_option_id(client, "bundle-ship-together")
    try:
        assert await _add_child(client, "bundle-ship-together", option_id, "SKU-4") is not None

        r = await _add_source_items(client, [SOURCE_ITEMS[1]])
        assert r.status_code == 200, r.text
        assert r.json()["count"] == 1

        data = await _get_source_items(client, "SKU-4")
        assert data["total_count"] == 1
        assert data["items"] == [
            {"source_code": "eu-2", "sku": "SKU-4", "quantity": 20.0, "status": 1}
        ]
    finally:
        await _delete_source_items(client, SOURCE_ITEMS)


@pytest.mark.asyncio
async def test_add_source_to_child_ship_separately(client):
    option_id = await _first_option_id(client, "bundle-ship-separately")
    try:
        assert await _add_child(client, "bundle-ship-separately", option_id, "SKU-4") is not None

        r = await _add_source_items(client, SOURCE_ITEMS)
        assert r.status_code == 200, r.text

        data = await _get_source_items(client, "SKU-4")
        assert data["total_count"] == 2
        got = {(it["source_code"], it["sku"], it["quantity"], it["status"]) for it in data["items"]}
        assert got == {("eu-1", "SKU-4", 10.0, 1), ("eu-2", "SKU-4", 20.0, 1)}
    finally:
        await _delete_source_items(client, SOURCE_ITEMS)

    data = await _get_source_items(client, "SKU-4")
    assert data["total_count"] == 0


@pytest.mark.asyncio
async def test_check_endpoint_reports_rule_outcome_without_writing(client):
    option_id = await _first_option_id(client, "bundle-ship-together")
    await _add_child(client, "bundle-ship-together", option_id, "SKU-4")

    r = await client.post(
        "/bundle-products/bundle-ship-together/source-assignments/check",
        json={"sku": "SKU-4", "source_codes": ["eu-1", "eu-2"]},
    )
    assert r.status_code == 200, r.text
    assert r.json() == {
        "allowed": False,
        "sku": "SKU-4",
        "source_code": "eu-1",
        "message": 'Not able to assign "eu-1" to product "SKU-4"',
    }

    r = await client.post(
        "/bundle-products/bundle-ship-together/source-assignments/check",
        json={"sku": "SKU-4", "source_codes": ["eu-2"]},
    )
    assert r.status_code == 200, r.text
    assert r.json()["allowed"] is True

    assert (await _get_source_items(client, "SKU-4"))["total_count"] == 0


@pytest.mark.asyncio
async def test_check_endpoint_not_a_child(client):
    r = await client.post(
        "/bundle-products/bundle-ship-together/source-assignments/check",
        json={"sku": "SKU-2", "source_codes": ["eu-1"]},
    )
    assert r.status_code == 422, r.text
    body = r.json()
    assert_problem_shape(body)
    assert body["error_code"] == "not_a_child"
