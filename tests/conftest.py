# tests/conftest.py
from __future__ import annotations

from decimal import Decimal
from typing import AsyncGenerator

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import NullPool

from bundle_sources.api.deps import get_session
from bundle_sources.db.schema import create_all
from bundle_sources.db.session import create_engine_for
from bundle_sources.main import app
from bundle_sources.models import (
    BundleLink,
    BundleOption,
    Product,
    ProductType,
    ShipmentType,
    Source,
    SourceItem,
    SourceItemStatus,
)

TOGETHER_SKU = "bundle-ship-together"
SEPARATELY_SKU = "bundle-ship-separately"


# =========================================
# 每用例独立的 sqlite 库文件（NullPool，避免跨 loop）
# =========================================
@pytest_asyncio.fixture(scope="function")
async def async_engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    engine = create_engine_for(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool)
    await create_all(engine)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture(scope="function")
def async_session_maker(async_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture(scope="function")
async def session(async_session_maker, _db_seed) -> AsyncGenerator[AsyncSession, None]:
    """
    干净的 Session：不自动提交，用例结束回滚未提交的部分。
    """
    async with async_session_maker() as sess:
        try:
            yield sess
        finally:
            if sess.in_transaction():
                await sess.rollback()


# =========================================
# 最小种子数据（session / client 用例各一次）：
#   sources: eu-1 / eu-2 / eu-3 / us-1
#   simple:  SKU-1 .. SKU-4
#   bundle:  bundle-ship-together / bundle-ship-separately，
#            各一个 option，子商品 SKU-1 + SKU-3
#   source items:
#     SKU-1: eu-1, eu-2
#     SKU-2: us-1
#     SKU-3: eu-2（缺货，但“有行即已分配”）
#   ★ eu-1 只有 SKU-1 有、SKU-3 没有；eu-2 两个子商品都有
# =========================================
@pytest_asyncio.fixture(scope="function")
async def _db_seed(async_session_maker) -> None:
    async with async_session_maker() as sess:
        sess.add_all(
            [
                Source(source_code="eu-1", name="EU-source-1"),
                Source(source_code="eu-2", name="EU-source-2"),
                Source(source_code="eu-3", name="EU-source-3"),
                Source(source_code="us-1", name="US-source-1"),
            ]
        )
        sess.add_all(
            [
                Product(sku=f"SKU-{i}", name=f"Simple Product {i}", type_id=ProductType.SIMPLE)
                for i in range(1, 5)
            ]
        )
        # 子商品先落库（bundle_links.sku 外键指向 products.sku）
        await sess.flush()

        for sku, shipment in (
            (TOGETHER_SKU, ShipmentType.TOGETHER),
            (SEPARATELY_SKU, ShipmentType.SEPARATELY),
        ):
            sess.add(
                Product(
                    sku=sku,
                    name=sku,
                    type_id=ProductType.BUNDLE,
                    shipment_type=shipment,
                    options=[
                        BundleOption(
                            title="Option 1",
                            position=1,
                            links=[
                                BundleLink(sku="SKU-1", qty=Decimal("1"), position=1),
                                BundleLink(sku="SKU-3", qty=Decimal("1"), position=2),
                            ],
                        )
                    ],
                )
            )
        await sess.flush()

        sess.add_all(
            [
                SourceItem(source_code="eu-1", sku="SKU-1", quantity=Decimal("5.5"), status=SourceItemStatus.IN_STOCK),
                SourceItem(source_code="eu-2", sku="SKU-1", quantity=Decimal("3"), status=SourceItemStatus.IN_STOCK),
                SourceItem(source_code="us-1", sku="SKU-2", quantity=Decimal("5"), status=SourceItemStatus.IN_STOCK),
                SourceItem(source_code="eu-2", sku="SKU-3", quantity=Decimal("6"), status=SourceItemStatus.OUT_OF_STOCK),
            ]
        )
        await sess.commit()


# =========================================
# FastAPI / httpx AsyncClient
# =========================================
@pytest_asyncio.fixture(scope="function")
async def client(async_session_maker, _db_seed) -> AsyncGenerator[httpx.AsyncClient, None]:
    async def _override_session() -> AsyncGenerator[AsyncSession, None]:
        async with async_session_maker() as sess:
            yield sess

    app.dependency_overrides[get_session] = _override_session
    transport = httpx.ASGITransport(app=app)
    try:
        async with httpx.AsyncClient(
            transport=transport,
            base_url="http://testserver",
            timeout=httpx.Timeout(10.0, connect=5.0, read=10.0, write=5.0, pool=5.0),
        ) as c:
            yield c
    finally:
        app.dependency_overrides.pop(get_session, None)
