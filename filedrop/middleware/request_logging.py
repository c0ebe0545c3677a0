# filedrop/middleware/request_logging.py
import time
from uuid import uuid4

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from filedrop.core.logging_config import logger

REQUEST_ID_HEADER = "X-Request-ID"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Bindt request_id aan alle logs van dit request en logt start/einde."""

    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid4().hex

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            endpoint=request.url.path,
            ip=request.client.host if request.client else "unknown",
        )

        logger.info("request_started")
        try:
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = request_id
            logger.info(
                "request_finished",
                status_code=response.status_code,
                latency_ms=round((time.perf_counter() - start) * 1000, 2),
            )
            return response
        except Exception:
            logger.exception(
                "request_failed",
                latency_ms=round((time.perf_counter() - start) * 1000, 2),
            )
            raise
        finally:
            structlog.contextvars.clear_contextvars()
