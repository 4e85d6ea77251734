from __future__ import annotations
import time, uuid
from typing import Optional

from components.socialcore.errors import InvalidToken

from .config import AuthConfig
from .contracts import AccessTokenClaims, ClockPort, TokenClaims, TokenSignerPort
from .crypto import HS256TokenSigner


class SystemClock(ClockPort):
    def now_utc_ts(self) -> int:
        return int(time.time())


class TokenIssuer:
    """Issues and verifies short-lived access tokens bound to {user_id, handle}."""

    def __init__(
        self,
        cfg: AuthConfig,
        *,
        signer: Optional[TokenSignerPort] = None,
        clock: Optional[ClockPort] = None,
    ):
        self.cfg = cfg
        self.clock = clock or SystemClock()
        self.signer = signer or HS256TokenSigner(cfg.secret, now=self.clock.now_utc_ts)

    @property
    def ttl_seconds(self) -> int:
        return self.cfg.access_ttl_seconds

    def issue(self, claims: TokenClaims) -> str:
        now = self.clock.now_utc_ts()
        payload = AccessTokenClaims(
            sub=claims.user_id,
            handle=claims.handle,
            iat=now,
            exp=now + self.cfg.access_ttl_seconds,
            iss=self.cfg.issuer,
            aud=self.cfg.audience,
            jti=str(uuid.uuid4()),
        ).model_dump()
        return self.signer.sign(payload)

    def verify(self, token: str) -> TokenClaims:
        payload = self.signer.verify(token)

        sub = payload.get("sub")
        handle = payload.get("handle")
        if not isinstance(sub, str) or not sub or not isinstance(handle, str) or not handle:
            raise InvalidToken("Token is missing identity claims")
        if payload.get("iss") != self.cfg.issuer:
            raise InvalidToken("Token issuer mismatch")
        if payload.get("aud") != self.cfg.audience:
            raise InvalidToken("Token audience mismatch")
        return TokenClaims(user_id=sub, handle=handle)
