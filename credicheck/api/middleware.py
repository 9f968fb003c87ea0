"""Request tracing, access logging and HTTP metrics"""

import logging
import re
import time
import uuid
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from credicheck.infrastructure.observability.metrics import request_duration_histogram

access_logger = logging.getLogger("credicheck.access")

# Caller ids are echoed into headers and logs, so only plain tokens are reused
REQUEST_ID_PATTERN = re.compile(r"^[A-Za-z0-9._-]{1,64}$")

# Scrape and liveness traffic
UNMETERED_PATHS = frozenset({"/metrics", "/health"})

UNMATCHED_ROUTE = "unmatched"


def route_template(request: Request) -> str:
    """Path template of the matched route, e.g. /v1/accounts/{account_id}"""
    route = request.scope.get("route")
    return getattr(route, "path", None) or UNMATCHED_ROUTE


def resolve_request_id(request: Request) -> str:
    supplied = request.headers.get("X-Request-ID", "")
    if REQUEST_ID_PATTERN.match(supplied):
        return supplied
    return f"req-{uuid.uuid4().hex}"


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Tag each request with an ID and write one access log line for it.

    A well-formed X-Request-ID from the caller is kept so partner systems can
    correlate their purchase calls; malformed ones are replaced.
    """

    async def dispatch(self, request: Request, call_next):
        request_id = resolve_request_id(request)
        request.state.request_id = request_id
        start = time.perf_counter()

        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id

        if request.url.path not in UNMETERED_PATHS:
            access_logger.info(
                "HTTP request",
                extra={
                    "request_id": request_id,
                    "method": request.method,
                    "route": route_template(request),
                    "status": response.status_code,
                    "duration_ms": round((time.perf_counter() - start) * 1000, 2),
                },
            )
        return response


class MetricsMiddleware(BaseHTTPMiddleware):
    """Request latency by route template; unknown paths share one label"""

    async def dispatch(self, request: Request, call_next):
        if request.url.path in UNMETERED_PATHS:
            return await call_next(request)

        start = time.perf_counter()
        response = await call_next(request)

        request_duration_histogram.labels(
            method=request.method,
            endpoint=route_template(request),
            status=response.status_code,
        ).observe(time.perf_counter() - start)
        return response
