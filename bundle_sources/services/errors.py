# bundle_sources/services/errors.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


class BundleSourceError(Exception):
    """服务层异常基类：路由层统一翻译为 Problem。"""

    error_code = "biz_error"
    http_status = 400


class NotFoundError(BundleSourceError):
    error_code = "not_found"
    http_status = 404


class ConflictError(BundleSourceError):
    error_code = "state_conflict"
    http_status = 409


@dataclass(eq=False)
class BadInputError(BundleSourceError):
    message: str
    details: list[dict[str, Any]] = field(default_factory=list)

    error_code = "request_validation_error"
    http_status = 422

    def __post_init__(self) -> None:
        super().__init__(self.message)


class NotAChildError(BundleSourceError):
    """目标 sku 不是该组合品任何 option 的子商品，校验无法进行。"""

    error_code = "not_a_child"
    http_status = 422

    def __init__(self, bundle_sku: str, sku: str):
        self.bundle_sku = bundle_sku
        self.sku = sku
        super().__init__(f'Product "{sku}" is not a child of bundle product "{bundle_sku}"')


class RejectedAssignmentError(BundleSourceError):
    """整单同发规则拒绝：其他子商品未分配到该 source。"""

    error_code = "source_assignment_rejected"
    http_status = 422

    def __init__(self, source_code: str, sku: str):
        self.source_code = source_code
        self.sku = sku
        super().__init__(rejection_message(source_code, sku))


def rejection_message(source_code: str, sku: str) -> str:
    return f'Not able to assign "{source_code}" to product "{sku}"'
