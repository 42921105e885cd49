from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from nexus_leave.limiter import limiter

if TYPE_CHECKING:
    from fastapi import FastAPI, Request, Response
    from starlette.middleware.base import RequestResponseEndpoint

    from nexus_leave.config import Settings

access_logger = logging.getLogger("nexus_leave.access")

SECURITY_HEADERS = {
    "Content-Security-Policy": (
        "default-src 'self'; style-src 'self' 'unsafe-inline'; script-src 'self'; img-src 'self' data: https:"
    ),
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
    "Cross-Origin-Opener-Policy": "same-origin",
    "X-DNS-Prefetch-Control": "off",
}


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add browser hardening headers to every response."""

    def __init__(self, app: object, hsts: bool = False) -> None:
        super().__init__(app)  # type: ignore[arg-type]
        self.headers = dict(SECURITY_HEADERS)
        if hsts:
            self.headers["Strict-Transport-Security"] = "max-age=15552000; includeSubDomains"

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        response = await call_next(request)
        for name, value in self.headers.items():
            response.headers.setdefault(name, value)
        return response


class AccessLogMiddleware(BaseHTTPMiddleware):
    """Log one line per request: client, method, path, status and duration."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000
        client = request.client.host if request.client else "-"
        access_logger.info(
            '%s "%s %s" %d %.1fms',
            client,
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
        )
        return response


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Install middleware. The last one added runs first on a request.

    Order on a request: CORS, access log, security headers, rate limit, gzip.
    """
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)  # type: ignore[arg-type]

    app.add_middleware(GZipMiddleware, minimum_size=1024)  # ty: ignore[invalid-argument-type]
    app.add_middleware(SlowAPIMiddleware)  # ty: ignore[invalid-argument-type]
    app.add_middleware(
        SecurityHeadersMiddleware,  # ty: ignore[invalid-argument-type]
        hsts=settings.environment == "production",
    )
    app.add_middleware(AccessLogMiddleware)  # ty: ignore[invalid-argument-type]
    app.add_middleware(
        CORSMiddleware,  # ty: ignore[invalid-argument-type]
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )
