# app/obs/metrics.py
import time

from prometheus_client import Counter, Histogram
from starlette.middleware.base import BaseHTTPMiddleware

http_requests_total = Counter("http_requests_total", "HTTP requests", ["method", "path", "code"])
http_request_duration = Histogram(
    "http_request_duration_seconds", "HTTP request duration seconds", ["method", "path"]
)

# webhook 结果分布：ignored / invalid_payload / not_pickup / not_synced / ok / partial_failure / error
webhook_outcomes_total = Counter(
    "pickup_webhook_outcomes_total", "Order webhook outcomes", ["status"]
)

# 逐 shipment 改仓：reassigned / skipped / failed
shipment_reassign_total = Counter(
    "pickup_shipment_reassign_total", "Per-shipment reassignment results", ["result"]
)

# 下游 GraphQL 调用耗时
directory_call_duration = Histogram(
    "pickup_directory_call_seconds", "Downstream directory call duration seconds", ["op"]
)


class PrometheusMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - start
        http_requests_total.labels(
            request.method, request.url.path, str(response.status_code)
        ).inc()
        http_request_duration.labels(request.method, request.url.path).observe(elapsed)
        return response
