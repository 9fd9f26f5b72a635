# bundle_sources/api/problem.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, TypedDict

from fastapi import HTTPException

from bundle_sources.services.errors import BadInputError, BundleSourceError


class ProblemDetail(TypedDict, total=False):
    # 必填
    type: str  # validation|state|rule
    # 可选：用于行内定位
    path: str  # e.g. source_items[2].sku
    reason: str
    sku: str
    source_code: str


@dataclass(frozen=True)
class Problem:
    error_code: str
    message: str
    http_status: int
    context: Optional[Dict[str, Any]] = None
    details: Optional[List[ProblemDetail]] = None
    trace_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "error_code": self.error_code,
            "message": self.message,
            "http_status": int(self.http_status),
        }
        if self.context:
            out["context"] = self.context
        if self.details:
            out["details"] = self.details
        if self.trace_id:
            out["trace_id"] = self.trace_id
        return out


def make_problem(
    *,
    status_code: int,
    error_code: str,
    message: str,
    context: Optional[Dict[str, Any]] = None,
    details: Optional[Sequence[ProblemDetail]] = None,
    trace_id: Optional[str] = None,
) -> Dict[str, Any]:
    p = Problem(
        error_code=str(error_code),
        message=str(message),
        http_status=int(status_code),
        context=context,
        details=list(details) if details else None,
        trace_id=trace_id,
    )
    return p.to_dict()


def problem_from_error(exc: BundleSourceError, *, context: Optional[Dict[str, Any]] = None) -> HTTPException:
    """把服务层异常翻译为带 Problem 的 HTTPException（路由层 raise ... from e）。"""
    details: Optional[List[ProblemDetail]] = None
    if isinstance(exc, BadInputError):
        details = list(exc.details)  # type: ignore[arg-type]
    else:
        rule_ctx = {k: getattr(exc, k) for k in ("sku", "source_code") if getattr(exc, k, None)}
        if rule_ctx:
            details = [{"type": "rule", "reason": str(exc), **rule_ctx}]  # type: ignore[list-item]

    return HTTPException(
        status_code=int(exc.http_status),
        detail=make_problem(
            status_code=int(exc.http_status),
            error_code=exc.error_code,
            message=str(exc),
            context=context,
            details=details,
        ),
    )
