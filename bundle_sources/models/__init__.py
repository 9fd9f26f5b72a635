# bundle_sources/models/__init__.py
"""
统一导出 ORM 模型。
"""

from bundle_sources.models.bundle import BundleLink, BundleOption
from bundle_sources.models.enums import PriceType, ProductType, ShipmentType, SourceItemStatus
from bundle_sources.models.product import Product
from bundle_sources.models.source import Source
from bundle_sources.models.source_item import SourceItem

__all__ = [
    "BundleLink",
    "BundleOption",
    "PriceType",
    "Product",
    "ProductType",
    "ShipmentType",
    "Source",
    "SourceItem",
    "SourceItemStatus",
]
