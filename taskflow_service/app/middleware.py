"""Middleware configuration for the FastAPI application."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING
import uuid

from fastapi import Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from taskflow_service.core.settings import get_app_settings, get_logging_settings
from taskflow_service.infra.logging import clear_log_context, set_log_context
from taskflow_service.infra.metrics import prometheus

if TYPE_CHECKING:
    from fastapi import FastAPI
    from starlette.types import ASGIApp

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Attach a request id to the request state, the log context and the response.

    An incoming ``X-Request-ID`` header is reused; otherwise a UUID4 is generated.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id
        set_log_context(request_id=request_id)
        try:
            response = await call_next(request)
        finally:
            clear_log_context()
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class TimingMiddleware(BaseHTTPMiddleware):
    """Record request duration as a header, a Prometheus histogram and slow-request logs."""

    def __init__(
        self,
        app: ASGIApp,
        slow_request_threshold: float = 1.0,
        log_slow_requests: bool = True,
    ) -> None:
        super().__init__(app)
        self.slow_request_threshold = slow_request_threshold
        self.log_slow_requests = log_slow_requests

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        start_time = time.perf_counter()
        response = await call_next(request)
        duration = time.perf_counter() - start_time

        # route template keeps label cardinality bounded
        route = request.scope.get("route")
        endpoint = getattr(route, "path", None) or "unmatched"

        prometheus.http_requests_total.labels(
            method=request.method,
            endpoint=endpoint,
            status=str(response.status_code),
        ).inc()
        prometheus.http_request_duration_seconds.labels(
            method=request.method,
            endpoint=endpoint,
        ).observe(duration)

        response.headers["X-Process-Time"] = f"{duration:.6f}"

        if self.log_slow_requests and duration > self.slow_request_threshold:
            logger.warning(
                "Slow request",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": response.status_code,
                    "duration": round(duration, 3),
                },
            )
        return response


def configure_middleware(app: FastAPI) -> None:
    """Configure middleware for the application.

    Starlette runs the last added middleware first, so the request id is
    bound before timing starts.
    """
    app_settings = get_app_settings()
    log_settings = get_logging_settings()

    cors_origins = app_settings.cors_origins or ["*"]
    logger.info("Configuring CORS", extra={"origins": cors_origins})

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=app_settings.cors_allow_credentials,
        allow_methods=app_settings.cors_allow_methods,
        allow_headers=app_settings.cors_allow_headers,
        max_age=app_settings.cors_max_age,
    )

    app.add_middleware(
        TimingMiddleware,
        slow_request_threshold=log_settings.slow_request_threshold,
        log_slow_requests=log_settings.log_slow_requests,
    )

    if log_settings.include_request_id:
        app.add_middleware(RequestIDMiddleware)
