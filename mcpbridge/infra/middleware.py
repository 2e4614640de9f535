"""Request middleware for tracking, CORS, and other cross-cutting concerns."""

import logging
import time
import uuid
from typing import Callable, Optional

from fastapi import Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from mcpbridge.infra.config import config
from mcpbridge.models.server_config import SecurityConfig

logger = logging.getLogger(__name__)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Attach a request ID to request state and echo it in X-Request-ID."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id

        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Log one line per HTTP request with its status and duration.

    Health and metrics probes are logged at DEBUG.
    """

    quiet_paths = ("/health", "/health/live", "/metrics")

    def __init__(self, app, logger: Optional[logging.Logger] = None):
        super().__init__(app)
        self.logger = logger or logging.getLogger("mcpbridge.request")

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        fields = {
            "request_id": getattr(request.state, "request_id", "unknown"),
            "method": request.method,
            "path": request.url.path,
            "client": request.client.host if request.client else None,
        }
        level = logging.DEBUG if request.url.path in self.quiet_paths else logging.INFO
        self.logger.log(level, "Request started", extra=fields)

        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            fields["duration_ms"] = int((time.perf_counter() - started) * 1000)
            self.logger.error("Request failed", extra={**fields, "error": str(e)}, exc_info=True)
            raise

        duration_ms = int((time.perf_counter() - started) * 1000)
        self.logger.log(
            level,
            "Request completed",
            extra={**fields, "status_code": response.status_code, "duration_ms": duration_ms},
        )
        response.headers["X-Response-Time-Ms"] = str(duration_ms)
        return response


def request_too_large(max_size: int) -> JSONResponse:
    """413 response shared by the declared-length check and the /mcp body check."""
    return JSONResponse(
        status_code=413,
        content={"detail": f"Request too large. Maximum size: {max_size} bytes"},
    )


class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    """
    Reject bodies whose declared Content-Length exceeds MAX_REQUEST_SIZE.

    Chunked bodies carry no length; the /mcp route checks those after reading.
    """

    def __init__(self, app, max_size: Optional[int] = None):
        super().__init__(app)
        self.max_size = max_size or config.MAX_REQUEST_SIZE

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        content_length = request.headers.get("content-length")
        if content_length and content_length.isdigit() and int(content_length) > self.max_size:
            return request_too_large(self.max_size)
        return await call_next(request)


def setup_cors(app, security: SecurityConfig):
    """Setup CORS middleware.

    CORS covers every route, /mcp and the OAuth discovery document included.
    allowed_origins narrows it whether or not enable_cors is set; an empty
    list allows any origin.
    """
    allowed_origins = [origin.strip() for origin in security.allowed_origins if origin.strip()]
    if not allowed_origins:
        allowed_origins = ["*"]
    if not security.enable_cors and security.allowed_origins:
        logger.info(
            "enable_cors is false but allowed_origins is set; applying allowed_origins",
            extra={"allowed_origins": allowed_origins},
        )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=[
            "Content-Type",
            "Authorization",
            "Accept",
            "Mcp-Session-Id",
            "X-Request-ID",
        ],
        expose_headers=["X-Request-ID", "WWW-Authenticate"],
        max_age=86400,
    )
