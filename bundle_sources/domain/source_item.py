# bundle_sources/domain/source_item.py
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from bundle_sources.models.enums import SourceItemStatus


@dataclass(frozen=True)
class SourceItemValue:
    """source item 写入/删除的载荷；(source_code, sku) 唯一确定一行。"""

    source_code: str
    sku: str
    quantity: Decimal = Decimal("0")
    status: SourceItemStatus = SourceItemStatus.IN_STOCK

    @property
    def key(self) -> tuple[str, str]:
        return (self.source_code, self.sku)
