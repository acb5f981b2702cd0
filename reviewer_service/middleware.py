# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
HTTP Middleware — request ID propagation and Prometheus metrics.
Separated from main.py for clean architecture.
"""

import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from reviewer_service.core.logging import request_id_var
from reviewer_service.metrics.prometheus import REQUEST_COUNT, REQUEST_LATENCY, HTTP_ERRORS

KNOWN_SEGMENTS: set[str] = {
    "team", "add", "get", "users", "setIsActive", "getReview",
    "pullRequest", "create", "merge", "reassign",
    "health", "ready", "metrics",
}

SKIP_PATHS: tuple[str, ...] = (
    "/health", "/health/ready", "/metrics", "/openapi.json", "/docs", "/redoc",
)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Propagate or generate X-Request-ID for distributed tracing."""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))
        request.state.request_id = request_id
        token = request_id_var.set(request_id)
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)
        response.headers["X-Request-ID"] = request_id
        return response


class MetricsMiddleware(BaseHTTPMiddleware):
    """Track request count, latency, and error rate via Prometheus."""

    async def dispatch(self, request: Request, call_next):
        start = time.time()
        response = await call_next(request)
        duration = time.time() - start

        path = request.url.path
        if path in SKIP_PATHS:
            return response

        parts = path.strip("/").split("/")
        normalized = (
            "/" + "/".join(p if p in KNOWN_SEGMENTS else "{param}" for p in parts)
            if parts != [""]
            else path
        )
        REQUEST_COUNT.labels(
            method=request.method,
            endpoint=normalized,
            status=str(response.status_code),
        ).inc()
        REQUEST_LATENCY.labels(
            method=request.method,
            endpoint=normalized,
        ).observe(duration)
        if response.status_code >= 400:
            HTTP_ERRORS.labels(
                method=request.method,
                endpoint=normalized,
                status=str(response.status_code),
            ).inc()

        return response
