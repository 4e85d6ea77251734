from __future__ import annotations
import time, uuid
from typing import Callable
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
import logging

logger = logging.getLogger("social.apigateway")

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    logging.getLogger("social").setLevel(level.upper())


class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable):
        start = time.perf_counter()
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        trace_id = request.headers.get("x-trace-id") or str(uuid.uuid4())

        request.state.request_id = request_id
        request.state.trace_id = trace_id
        request.state.started_at = start

        logger.info(
            "request.start method=%s path=%s",
            request.method, request.url.path,
            extra={"request_id": request_id, "trace_id": trace_id},
        )
        try:
            response: Response = await call_next(request)
        except Exception:
            duration_ms = int((time.perf_counter() - start) * 1000)
            logger.exception(
                "request.exception duration_ms=%d", duration_ms,
                extra={"request_id": request_id, "trace_id": trace_id},
            )
            raise
        duration_ms = int((time.perf_counter() - start) * 1000)
        response.headers["x-request-id"] = request_id
        response.headers["x-trace-id"] = trace_id
        log = logger.warning if response.status_code >= 400 else logger.info
        log(
            "request.end status=%d duration_ms=%d", response.status_code, duration_ms,
            extra={"request_id": request_id, "trace_id": trace_id},
        )
        return response
