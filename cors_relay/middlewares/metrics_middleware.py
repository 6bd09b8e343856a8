from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
import time

# Request count metric
REQUEST_COUNT = Counter(
    "relay_http_requests_total", "Total number of HTTP requests",
    ["method", "endpoint", "status_code"]
)

# Time until response headers are ready; streamed bodies are not included
REQUEST_DURATION = Histogram(
    "relay_http_request_duration_seconds", "Histogram of request processing time",
    ["method", "endpoint"]
)

# Only known routes get their own label, so arbitrary preflight paths can't blow up cardinality
KNOWN_ENDPOINTS = {"/fetch", "/openai/chat", "/health", "/metrics"}


class PrometheusMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        method = request.method
        endpoint = request.url.path if request.url.path in KNOWN_ENDPOINTS else "other"

        start_time = time.time()
        response = await call_next(request)
        duration = time.time() - start_time

        REQUEST_COUNT.labels(method=method, endpoint=endpoint, status_code=response.status_code).inc()
        REQUEST_DURATION.labels(method=method, endpoint=endpoint).observe(duration)

        return response

# Metrics endpoint handler
async def metrics():
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
