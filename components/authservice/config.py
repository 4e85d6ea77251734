from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class AuthConfig:
    secret: str
    access_ttl_seconds: int = 900          # 15 minutes
    password_iterations: int = 600_000     # PBKDF2-SHA256 work factor
    issuer: str = "social-core"
    audience: str = "social-clients"

    def __post_init__(self) -> None:
        if not self.secret:
            raise ValueError("AuthConfig requires a non-empty secret")
        if self.access_ttl_seconds <= 0:
            raise ValueError("access_ttl_seconds must be positive")
        if self.password_iterations <= 0:
            raise ValueError("password_iterations must be positive")
