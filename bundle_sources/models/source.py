# bundle_sources/models/source.py
from __future__ import annotations

from sqlalchemy import Boolean, Integer, String, true
from sqlalchemy.orm import Mapped, mapped_column

from bundle_sources.db.base import Base


class Source(Base):
    """
    库存来源（仓 / 门店 / 前置仓）主档：
    - source_code: 业务主键（全局唯一），source item 通过它引用
    - enabled:     停用的 source 仍可被引用，只是不参与可售计算
    """

    __tablename__ = "sources"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    source_code: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default=true())

    def __repr__(self) -> str:
        return f"<Source code={self.source_code!r} enabled={self.enabled}>"
