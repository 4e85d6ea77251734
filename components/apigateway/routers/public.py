from __future__ import annotations
from datetime import datetime, timezone

from fastapi import APIRouter, Request

from ..contracts import HealthResult, UWFResponse
from ..envelope import uwf_ok

router = APIRouter(tags=["health"])


@router.get("/healthz", response_model=UWFResponse)
def health(request: Request):
    version = request.app.state.settings.app_version
    now = datetime.now(timezone.utc).isoformat()
    return uwf_ok(request, HealthResult(status="ok", version=version, time=now))
