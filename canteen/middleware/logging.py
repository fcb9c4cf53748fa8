import time
import logging
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("access")


class LoggingMiddleware(BaseHTTPMiddleware):
    """One access line per request: client, route, status and duration"""

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        client = request.client.host if request.client else "-"
        route = request.url.path
        if request.url.query:
            route = f"{route}?{request.url.query}"

        try:
            response = await call_next(request)
        except Exception:
            elapsed = time.perf_counter() - started
            logger.exception(f"💥 {client} {request.method} {route} failed after {elapsed:.4f}s")
            raise

        elapsed = time.perf_counter() - started
        level = logging.WARNING if response.status_code >= 500 else logging.INFO
        logger.log(level, f"{client} {request.method} {route} -> {response.status_code} in {elapsed:.4f}s")

        response.headers["X-Process-Time"] = f"{elapsed:.4f}"
        return response
