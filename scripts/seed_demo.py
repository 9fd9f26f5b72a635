# scripts/seed_demo.py
"""
演示数据：两个 source、四个单品、两个组合品（together / separately）。

    DATABASE_URL=sqlite:///./bundle_sources.db python scripts/seed_demo.py
"""
import asyncio
import os
import sys
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

# 直接运行脚本时把项目根目录加入路径
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from bundle_sources.core.logging import setup_logging
from bundle_sources.db.schema import create_all
from bundle_sources.db.session import close_engines, get_engine, get_sessionmaker
from bundle_sources.domain.source_item import SourceItemValue
from bundle_sources.models.enums import ProductType, ShipmentType
from bundle_sources.services import product_repo, source_repo
from bundle_sources.services.source_item_service import save_source_items


async def seed_catalog(session: AsyncSession) -> None:
    for code, name in (("eu-1", "EU-source-1"), ("eu-2", "EU-source-2")):
        await source_repo.create_source(session, source_code=code, name=name)

    for i in range(1, 5):
        await product_repo.create_product(session, sku=f"SKU-{i}", name=f"Simple Product {i}")
    await session.commit()

    # 先给单品落 source item，再挂到组合品下：
    # together 组合品里任一子商品新增 source 都要求兄弟已有，挂好之后就补不进去了
    await save_source_items(
        session,
        [
            SourceItemValue("eu-1", "SKU-1", Decimal("5.5")),
            SourceItemValue("eu-2", "SKU-1", Decimal("3")),
            SourceItemValue("eu-2", "SKU-3", Decimal("6")),
        ],
    )

    for sku, shipment in (
        ("bundle-ship-together", ShipmentType.TOGETHER),
        ("bundle-ship-separately", ShipmentType.SEPARATELY),
    ):
        await product_repo.create_product(
            session, sku=sku, name=sku, type_id=ProductType.BUNDLE, shipment_type=shipment
        )
        opt = await product_repo.create_option(session, sku, title="Option 1", position=1)
        for pos, child in enumerate(("SKU-1", "SKU-3"), start=1):
            await product_repo.add_child(session, sku, opt.id, sku=child, position=pos)
    await session.commit()


async def seed() -> None:
    await create_all(get_engine())

    async with get_sessionmaker()() as session:
        print("开始填充演示数据...")
        await seed_catalog(session)
        print("演示数据填充完成！")

    await close_engines()


if __name__ == "__main__":
    setup_logging("INFO")
    asyncio.run(seed())
