from __future__ import annotations
from typing import Any, Dict, Literal, Optional, Protocol

from pydantic import BaseModel, constr, field_validator
from pydantic.networks import validate_email

from components.socialcore.contracts import UserAccount, WireModel

HANDLE_PATTERN = r"^[A-Za-z0-9_]+$"


# ---------- Domain Models ----------
class TokenClaims(BaseModel):
    """Identity carried by a bearer token."""
    user_id: str
    handle: str


class AccessTokenClaims(BaseModel):
    sub: str
    handle: str
    iat: int
    exp: int
    iss: Optional[str] = None
    aud: Optional[str] = None
    jti: Optional[str] = None


class AuthResult(WireModel):
    user: UserAccount
    access_token: str
    token_type: Literal["Bearer"] = "Bearer"
    expires_in: int


# ---------- Ports (Contracts) ----------
class TokenSignerPort(Protocol):
    """
    Contract for JWT signing/verification.
    verify() raises InvalidToken or TokenExpired.
    """
    def sign(self, claims: Dict[str, Any]) -> str: ...
    def verify(self, token: str) -> Dict[str, Any]: ...


class ClockPort(Protocol):
    def now_utc_ts(self) -> int: ...


# ---------- Service I/O ----------
class RegisterRequest(WireModel):
    email: constr(min_length=3, max_length=320)
    handle: constr(min_length=3, max_length=30, pattern=HANDLE_PATTERN)
    name: constr(min_length=1, max_length=100)
    password: constr(min_length=8, max_length=72)

    @field_validator("email")
    @classmethod
    def _email_format(cls, v: str) -> str:
        # format check only; the address is stored and matched exactly as submitted
        _, address = validate_email(v)
        if address.lower() != v.lower():
            raise ValueError("value is not a bare email address")
        return v


class LoginRequest(WireModel):
    email_or_handle: constr(min_length=1)
    password: constr(min_length=1)
