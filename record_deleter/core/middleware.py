from __future__ import annotations

import time
from uuid import uuid4

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from record_deleter.core.logging import get_logger, request_id_ctx

logger = get_logger("record_deleter.request")


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Tags each request with an ``X-Request-ID`` and logs its lifecycle."""

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid4())
        token = request_id_ctx.set(request_id)
        request.state.request_id = request_id

        context = {"method": request.method, "path": request.url.path}
        start = time.perf_counter()
        logger.info("request.start", extra={"event": "request.start", **context})

        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "request.error",
                extra={
                    "event": "request.error",
                    "duration_ms": int((time.perf_counter() - start) * 1000),
                    **context,
                },
            )
            raise
        else:
            response.headers["X-Request-ID"] = request_id
            logger.info(
                "request.complete",
                extra={
                    "event": "request.complete",
                    "status_code": response.status_code,
                    "duration_ms": int((time.perf_counter() - start) * 1000),
                    **context,
                },
            )
            return response
        finally:
            request_id_ctx.reset(token)
