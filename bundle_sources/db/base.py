# bundle_sources/db/base.py
from __future__ import annotations

import importlib
import logging

from sqlalchemy.orm import DeclarativeBase, configure_mappers

log = logging.getLogger("bundle_sources.models")


class Base(DeclarativeBase):
    """全局唯一 ORM Base"""

    pass


_INITIALIZED: bool = False  # 防重复初始化

# 显式导入链：保证字符串关系目标类在 configure_mappers 之前已注册
_MODEL_MODULES = (
    "bundle_sources.models.source",
    "bundle_sources.models.product",
    "bundle_sources.models.bundle",
    "bundle_sources.models.source_item",
)


def init_models(*, force: bool = False) -> None:
    """
    集中导入模型 + 固化关系映射。
    建表（create_all）/ alembic autogenerate 之前必须先调用。
    """
    global _INITIALIZED
    if _INITIALIZED and not force:
        log.debug("init_models() called again; already initialized, skipping.")
        return

    for mod in _MODEL_MODULES:
        importlib.import_module(mod)

    configure_mappers()
    _INITIALIZED = True
    log.info("ORM models initialized & mappers configured (loaded %d modules)", len(_MODEL_MODULES))
