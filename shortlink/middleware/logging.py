"""
Access Logging Middleware

Logs one line per HTTP request:

    METHOD PATH STATUS_CODE PROCESS_TIME_MS IP:CLIENT_IP

and reports the processing time back to the client in X-Process-Time.
The Authorization header is never logged.
"""

import logging
import time

from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

logger = logging.getLogger("shortlink.access")


def get_client_ip(request: Request) -> str:
    """
    Extract client IP address from request.

    Prefers the first X-Forwarded-For hop when running behind a proxy.
    """
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware logging method, path, status and latency of each request."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        start_time = time.perf_counter()
        response = await call_next(request)
        process_time = time.perf_counter() - start_time

        logger.info(
            f"{request.method} {request.url.path} "
            f"{response.status_code} {process_time * 1000:.2f}ms "
            f"IP:{get_client_ip(request)}"
        )
        response.headers["X-Process-Time"] = f"{process_time:.6f}"
        return response


def add_logging_middleware(app: FastAPI) -> None:
    app.add_middleware(LoggingMiddleware)
