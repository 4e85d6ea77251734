from __future__ import annotations
import base64, binascii, json, hmac, hashlib, time
from typing import Any, Callable, Dict, Optional

from components.socialcore.errors import InvalidToken, TokenExpired


def _b64url(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("utf-8")


def _unb64url(s: str) -> bytes:
    pad = '=' * (-len(s) % 4)
    return base64.urlsafe_b64decode(s + pad)


class HS256TokenSigner:
    """
    Minimal HS256 JWT signer.
    verify() raises InvalidToken for anything structurally or
    cryptographically wrong, TokenExpired once `exp` has passed.
    """
    def __init__(self, secret: str, kid: Optional[str] = "primary", now: Optional[Callable[[], float]] = None):
        if not secret:
            raise ValueError("HS256TokenSigner requires non-empty secret")
        self._secret = secret.encode("utf-8")
        self._kid = kid
        self._now = now or time.time

    def sign(self, claims: Dict[str, Any]) -> str:
        headers = {"alg": "HS256", "typ": "JWT"}
        if self._kid:
            headers["kid"] = self._kid
        header_b64 = _b64url(json.dumps(headers, separators=(",", ":")).encode("utf-8"))
        payload_b64 = _b64url(json.dumps(claims, separators=(",", ":")).encode("utf-8"))
        signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
        sig = hmac.new(self._secret, signing_input, hashlib.sha256).digest()
        return f"{header_b64}.{payload_b64}.{_b64url(sig)}"

    def verify(self, token: str) -> Dict[str, Any]:
        try:
            header_b64, payload_b64, sig_b64 = token.split(".")
        except (AttributeError, ValueError):
            raise InvalidToken("Invalid token format")
        try:
            header = json.loads(_unb64url(header_b64).decode("utf-8"))
            signature = _unb64url(sig_b64)
        except (binascii.Error, UnicodeDecodeError, ValueError):
            raise InvalidToken("Invalid token encoding")
        if not isinstance(header, dict) or header.get("alg") != "HS256":
            raise InvalidToken("Unsupported token algorithm")

        signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
        expected_sig = hmac.new(self._secret, signing_input, hashlib.sha256).digest()
        if not hmac.compare_digest(expected_sig, signature):
            raise InvalidToken("Signature mismatch")

        try:
            payload = json.loads(_unb64url(payload_b64).decode("utf-8"))
        except (binascii.Error, UnicodeDecodeError, ValueError):
            raise InvalidToken("Invalid token payload")
        if not isinstance(payload, dict):
            raise InvalidToken("Invalid token payload")
        try:
            exp = int(payload["exp"])
        except (KeyError, TypeError, ValueError):
            raise InvalidToken("Token has no expiry")
        if self._now() >= exp:
            raise TokenExpired("Token expired")
        return payload
