# bundle_sources/obs/metrics.py
import time

from prometheus_client import Counter, Histogram
from starlette.middleware.base import BaseHTTPMiddleware

UNMATCHED_ROUTE = "<unmatched>"

http_requests_total = Counter("http_requests_total", "HTTP requests", ["method", "path", "code"])
http_request_duration = Histogram(
    "http_request_duration_seconds", "HTTP request duration seconds", ["method", "path"]
)

# 组合品子商品 source 分配校验结果（outcome: allowed / rejected）
source_assignment_checks_total = Counter(
    "source_assignment_checks_total",
    "Bundle child source assignment checks",
    ["shipment_type", "outcome"],
)
source_items_saved_total = Counter("source_items_saved_total", "Source items saved")
source_items_deleted_total = Counter("source_items_deleted_total", "Source items deleted")


class PrometheusMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - start
        # 用路由模板而不是原始 path，避免 sku 打爆 label 基数；未匹配路由（404）归到同一个 label
        route = request.scope.get("route")
        path = getattr(route, "path", None) or UNMATCHED_ROUTE
        http_requests_total.labels(request.method, path, str(response.status_code)).inc()
        http_request_duration.labels(request.method, path).observe(elapsed)
        return response
