import time
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

REQ_COUNT = Counter("http_requests_total", "Total HTTP requests", ["path","method","code"])
REQ_LATENCY = Histogram("http_request_duration_seconds", "Request latency", ["path","method"])

# Label for requests no route matched (404 scans)
UNMATCHED_PATH = "<unmatched>"

# One increment per call to BAN / IGN / Etalab / ADEME
UPSTREAM_CALLS = Counter(
    "upstream_requests_total", "Calls to public data APIs", ["source","outcome"]
)
MATCHED_UNITS = Histogram(
    "matched_units", "Transactions kept per units lookup",
    buckets=(0, 1, 2, 5, 10, 20, 50),
)

class PromMiddleware(BaseHTTPMiddleware):
    """
    Measures latency and counts requests.
    """
    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        response: Response = await call_next(request)
        elapsed = time.perf_counter() - start

        # Route template keeps label cardinality bounded; unrouted 404s share one label
        route = request.scope.get("route")
        path = getattr(route, "path", None)
        if path is None:
            path = UNMATCHED_PATH if response.status_code == 404 else request.url.path
        method = request.method
        code = str(response.status_code)

        REQ_COUNT.labels(path=path, method=method, code=code).inc()
        REQ_LATENCY.labels(path=path, method=method).observe(elapsed)
        return response

async def metrics_endpoint(request: Request):
    """
    GET /v1/metrics, scraped by Prometheus.
    """
    data = generate_latest()
    return Response(content=data, media_type=CONTENT_TYPE_LATEST)
