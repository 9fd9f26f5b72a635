# bundle_sources/models/source_item.py
from __future__ import annotations

from decimal import Decimal

import sqlalchemy as sa
from sqlalchemy import UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from bundle_sources.db.base import Base


class SourceItem(Base):
    """
    source item：商品在某个 source 上的库存槽位 (source_code, sku)

    - 有行即“已分配到该 source”，与 quantity / status 无关
    - status: 1 有货 / 0 缺货
    """

    __tablename__ = "source_items"

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)

    source_code: Mapped[str] = mapped_column(
        sa.String(64),
        sa.ForeignKey("sources.source_code", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    sku: Mapped[str] = mapped_column(
        sa.String(64),
        sa.ForeignKey("products.sku", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    quantity: Mapped[Decimal] = mapped_column(sa.Numeric(12, 4), nullable=False, server_default="0")
    status: Mapped[int] = mapped_column(sa.SmallInteger, nullable=False, server_default="1")

    __table_args__ = (
        UniqueConstraint("source_code", "sku", name="uq_source_items_source_sku"),
        sa.CheckConstraint("quantity >= 0", name="ck_source_items_qty_non_negative"),
        sa.CheckConstraint("status IN (0, 1)", name="ck_source_items_status"),
    )

    def __repr__(self) -> str:
        return (
            f"<SourceItem source={self.source_code} sku={self.sku} "
            f"qty={self.quantity} status={self.status}>"
        )
