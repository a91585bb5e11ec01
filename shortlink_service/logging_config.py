"""
Logging setup and request logging middleware.

All loggers live under the "shortlink" namespace:
    - shortlink.storage : backend selection, journal replay
    - shortlink.api     : one line per HTTP request
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

LOGGER_NAME = "shortlink"


def configure_logging(level: str = "info") -> logging.Logger:
    """Configure console logging once and set the service log level.

    Unknown level names fall back to INFO.
    """
    resolved = logging.getLevelName(level.strip().upper())
    if not isinstance(resolved, int):
        resolved = logging.INFO

    if not logging.getLogger().handlers:
        logging.basicConfig(
            level=resolved,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
    log = logging.getLogger(LOGGER_NAME)
    log.setLevel(resolved)
    return log


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log method, path, status, duration and response size of every request."""

    def __init__(self, app, logger: logging.Logger = None):
        super().__init__(app)
        self.logger = logger or logging.getLogger(f"{LOGGER_NAME}.api")

    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000
        self.logger.info(
            "%s %s -> %d in %.2fms (%s bytes)",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
            response.headers.get("content-length", "-"),
        )
        return response
