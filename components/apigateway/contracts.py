from __future__ import annotations
from typing import Any, Dict, Literal, Optional
from pydantic import BaseModel, constr

# ---------- Unified Wire Format (UWF) ----------

ErrorType = Literal["AUTH_ERROR", "VALIDATION", "NOT_FOUND", "CONFLICT", "UPSTREAM", "INTERNAL"]


class ErrorPayload(BaseModel):
    type: ErrorType
    code: constr(strip_whitespace=True, min_length=1)
    message: constr(strip_whitespace=True, min_length=1)
    details: Optional[Dict[str, Any]] = None


class MetaPayload(BaseModel):
    trace_id: Optional[str] = None
    request_id: Optional[str] = None
    duration_ms: Optional[int] = None


class UWFResponse(BaseModel):
    ok: bool
    result: Optional[Any] = None
    error: Optional[ErrorPayload] = None
    meta: MetaPayload


# ---------- Responses (Results) ----------

class HealthResult(BaseModel):
    status: Literal["ok"]
    version: str
    time: str
