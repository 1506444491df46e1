from __future__ import annotations

import logging
import time

from prometheus_client import Counter, Histogram
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

logger = logging.getLogger("kflow.api.access")

HTTP_REQUESTS_TOTAL = Counter(
    "http_requests_total",
    "Total number of HTTP requests",
    ["method", "route", "status_code"],
)
HTTP_REQUEST_SECONDS = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "route"],
)


def route_label(request: Request) -> str:
    # Metrics are labelled by route template, never by the raw path with ids.
    route = request.scope.get("route")
    return getattr(route, "path", request.url.path)


class AccessLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        status_code = 500
        raised = False
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        except Exception:
            raised = True
            logger.exception(
                "request_error",
                extra={"method": request.method, "path": request.url.path, "status_code": 500},
            )
            raise
        finally:
            elapsed = time.perf_counter() - started
            route = route_label(request)
            HTTP_REQUESTS_TOTAL.labels(
                method=request.method, route=route, status_code=str(status_code)
            ).inc()
            HTTP_REQUEST_SECONDS.labels(method=request.method, route=route).observe(elapsed)
            if not raised:
                logger.info(
                    "request_complete",
                    extra={
                        "method": request.method,
                        "path": request.url.path,
                        "status_code": status_code,
                        "duration_ms": round(elapsed * 1000, 2),
                    },
                )
