# create_tables.py
import asyncio

from bundle_sources.db.schema import create_all
from bundle_sources.db.session import close_engines, get_engine


async def _main() -> None:
    print("正在创建所有数据库表...")
    await create_all(get_engine())
    await close_engines()
    print("所有数据库表创建完成！")


if __name__ == "__main__":
    asyncio.run(_main())
