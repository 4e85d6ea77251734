from __future__ import annotations
import time
from typing import Any, Optional

from fastapi import Request

from .contracts import ErrorPayload, MetaPayload, UWFResponse


def _meta(request: Request) -> MetaPayload:
    started: Optional[float] = getattr(request.state, "started_at", None)
    return MetaPayload(
        trace_id=getattr(request.state, "trace_id", None),
        request_id=getattr(request.state, "request_id", None),
        duration_ms=int((time.perf_counter() - started) * 1000) if started is not None else None,
    )


def uwf_ok(request: Request, result: Any) -> UWFResponse:
    return UWFResponse(ok=True, result=result, error=None, meta=_meta(request))


def uwf_err(request: Request, error: ErrorPayload) -> UWFResponse:
    return UWFResponse(ok=False, result=None, error=error, meta=_meta(request))
