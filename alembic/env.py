# alembic/env.py
from __future__ import annotations

from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine
from sqlalchemy.engine import Connection, make_url
from sqlalchemy.pool import NullPool

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# 延迟加载模型（避免导入时机引发的问题）
from bundle_sources.core.config import get_settings  # noqa: E402
from bundle_sources.db.base import Base, init_models  # noqa: E402
from bundle_sources.db.session import normalize_async_dsn  # noqa: E402

init_models()
target_metadata = Base.metadata


def _sync_url() -> str:
    """
    应用侧是异步驱动；alembic 走同步连接：
    - sqlite+aiosqlite → sqlite
    - postgresql+psycopg 同步/异步通用，原样使用
    """
    url = make_url(normalize_async_dsn(get_settings().DATABASE_URL))
    if url.drivername == "sqlite+aiosqlite":
        url = url.set(drivername="sqlite")
    return url.render_as_string(hide_password=False)


def run_migrations_offline() -> None:
    context.configure(
        url=_sync_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
    )
    with context.begin_transaction():
        context.run_migrations()


def _do_run(connection: Connection) -> None:
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        compare_type=True,
        render_as_batch=connection.dialect.name == "sqlite",
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    engine = create_engine(_sync_url(), poolclass=NullPool, future=True)
    with engine.connect() as connection:
        _do_run(connection)
    engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
