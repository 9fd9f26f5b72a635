# bundle_sources/models/enums.py
from __future__ import annotations

from enum import IntEnum, StrEnum


class ProductType(StrEnum):
    """
    商品形态：
    - SIMPLE  单品（可挂 source item）
    - BUNDLE  组合品（由 option 下的子商品组成，自身不挂 source item）
    """

    SIMPLE = "simple"
    BUNDLE = "bundle"


class ShipmentType(StrEnum):
    """
    组合品发货方式（决定子商品之间的 source 一致性约束）：
    - TOGETHER    整单同发：所有子商品必须能从同一 source 发出
    - SEPARATELY  分开发：各子商品 source 互不约束
    """

    TOGETHER = "together"
    SEPARATELY = "separately"


class SourceItemStatus(IntEnum):
    OUT_OF_STOCK = 0
    IN_STOCK = 1


class PriceType(IntEnum):
    # 仅存储，不参与计价
    FIXED = 0
    PERCENT = 1
    DYNAMIC = 2
