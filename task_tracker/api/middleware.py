"""HTTP middleware for request logging and tracing."""

import time
from collections.abc import Iterable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from ..core.logging import generate_request_id, get_logger, request_id_var

DEFAULT_SKIP_PATHS = ("/health", "/docs", "/redoc", "/openapi.json")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Observer for every request crossing the HTTP boundary.

    Logs:
    - method and path
    - response status (WARNING for 4xx/5xx)
    - duration in ms
    - request id, also returned as the X-Request-ID header

    It only observes: the request and response pass through unchanged.
    Attached in main.py when settings.REQUEST_LOGGING is on.

    Example log (JSON):
    {
        "level": "INFO",
        "logger": "api.requests",
        "message": "Request completed",
        "request_id": "abc-123",
        "extra": {"method": "GET", "path": "/tasks", "query": "tag=errand",
                  "status": 200, "duration_ms": 4, "client_ip": "127.0.0.1"}
    }
    """

    def __init__(
        self,
        app: ASGIApp,
        logger_name: str = "api.requests",
        skip_paths: Iterable[str] = DEFAULT_SKIP_PATHS,
    ):
        super().__init__(app)
        self.logger = get_logger(logger_name)
        self.skip_paths = frozenset(skip_paths)

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = generate_request_id()
        request_id_var.set(request_id)

        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"

        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = int((time.perf_counter() - start_time) * 1000)
            self.logger.error(
                "Request failed",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "duration_ms": duration_ms,
                    "client_ip": client_ip,
                    "error": str(e),
                },
                exc_info=True,
            )
            raise

        duration_ms = int((time.perf_counter() - start_time) * 1000)
        response.headers["X-Request-ID"] = request_id

        if request.url.path not in self.skip_paths:
            log = self.logger.info if response.status_code < 400 else self.logger.warning
            log(
                "Request completed",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "query": request.url.query,
                    "status": response.status_code,
                    "duration_ms": duration_ms,
                    "client_ip": client_ip,
                },
            )

        return response
