# bundle_sources/domain/bundle.py
"""
组合品的只读值对象：一次校验请求内不可变，由 product_repo 在读取时组装。
"""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterator

from bundle_sources.models.enums import ShipmentType


@dataclass(frozen=True)
class BundleLinkValue:
    sku: str
    qty: Decimal = Decimal("1")
    price: Decimal = Decimal("0")
    position: int = 0
    is_default: bool = False
    can_change_quantity: bool = False


@dataclass(frozen=True)
class BundleOptionValue:
    option_id: int
    title: str = ""
    children: tuple[BundleLinkValue, ...] = ()

    @property
    def child_skus(self) -> tuple[str, ...]:
        return tuple(c.sku for c in self.children)


@dataclass(frozen=True)
class BundleProduct:
    sku: str
    shipment_type: ShipmentType
    options: tuple[BundleOptionValue, ...] = field(default_factory=tuple)

    def iter_child_skus(self) -> Iterator[str]:
        """按 option 顺序遍历所有子商品 sku（去重，保序）。"""
        seen: set[str] = set()
        for opt in self.options:
            for s in opt.child_skus:
                if s not in seen:
                    seen.add(s)
                    yield s

    def has_child(self, sku: str) -> bool:
        return any(sku in opt.child_skus for opt in self.options)

    def sibling_skus(self, sku: str) -> list[str]:
        return [s for s in self.iter_child_skus() if s != sku]
