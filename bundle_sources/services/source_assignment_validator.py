# bundle_sources/services/source_assignment_validator.py
"""
组合品子商品 source 分配校验（纯函数，无 IO）：

- separately：子商品之间互不约束，直接放行
- together：  新增到某子商品的 source，必须已经分配给其余 *所有* 子商品；
              任意一个兄弟缺这个 source 就拒绝（全有或全无，不放宽为“至少一个兄弟有”）
- 目标 sku 已有的 source 不重复校验（幂等）
- 没有兄弟子商品时规则空真，任何 source 均放行

兄弟子商品的分配快照由调用方在同一事务内读取后传入，本模块不缓存任何状态。
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping, Optional

from bundle_sources.domain.bundle import BundleProduct
from bundle_sources.models.enums import ShipmentType
from bundle_sources.services.errors import (
    NotAChildError,
    RejectedAssignmentError,
    rejection_message,
)


@dataclass(frozen=True)
class AssignmentResult:
    allowed: bool
    source_code: Optional[str] = None
    sku: Optional[str] = None

    @classmethod
    def ok(cls) -> "AssignmentResult":
        return cls(allowed=True)

    @classmethod
    def rejected(cls, source_code: str, sku: str) -> "AssignmentResult":
        return cls(allowed=False, source_code=source_code, sku=sku)

    @property
    def message(self) -> Optional[str]:
        if self.allowed:
            return None
        return rejection_message(str(self.source_code), str(self.sku))

    def raise_for_rejection(self) -> None:
        if not self.allowed:
            raise RejectedAssignmentError(str(self.source_code), str(self.sku))


def validate_assignment(
    bundle: BundleProduct,
    target_sku: str,
    requested_source_codes: Iterable[str],
    assignments: Mapping[str, Iterable[str]],
) -> AssignmentResult:
    if not bundle.has_child(target_sku):
        raise NotAChildError(bundle.sku, target_sku)

    if bundle.shipment_type == ShipmentType.SEPARATELY:
        return AssignmentResult.ok()

    already = set(assignments.get(target_sku, ()))
    siblings = [(s, set(assignments.get(s, ()))) for s in bundle.sibling_skus(target_sku)]

    for code in _dedupe(requested_source_codes):
        if code in already:
            continue
        for _sku, codes in siblings:
            if code not in codes:
                return AssignmentResult.rejected(code, target_sku)

    return AssignmentResult.ok()


def _dedupe(codes: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    out: list[str] = []
    for c in codes:
        if c not in seen:
            seen.add(c)
            out.append(c)
    return out
