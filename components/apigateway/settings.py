from __future__ import annotations
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from components.authservice.config import AuthConfig

APP_NAME = "social-core-apigateway"


class GatewaySettings(BaseSettings):
    """
    Process configuration; read once at bootstrap, never inside services.
    SOCIAL_DATABASE_URL and SOCIAL_AUTH_SECRET have no defaults: startup fails without them.
    """

    model_config = SettingsConfigDict(env_prefix="SOCIAL_", env_file=".env", case_sensitive=False)

    app_version: str = "0.1.0"
    database_url: str = Field(min_length=1)
    log_level: str = "INFO"

    host: str = "0.0.0.0"
    port: int = Field(default=8080, gt=0, lt=65536)
    cors_origin: str = "http://localhost:5173"     # comma-separated

    auth_secret: str = Field(min_length=1)
    access_ttl_seconds: int = Field(default=900, gt=0)            # 15 minutes
    password_iterations: int = Field(default=600_000, gt=0)
    auth_issuer: str = "social-core"
    auth_audience: str = "social-clients"

    def cors_origins(self) -> List[str]:
        return [o.strip() for o in self.cors_origin.split(",") if o.strip()]

    def auth_config(self) -> AuthConfig:
        return AuthConfig(
            secret=self.auth_secret,
            access_ttl_seconds=self.access_ttl_seconds,
            password_iterations=self.password_iterations,
            issuer=self.auth_issuer,
            audience=self.auth_audience,
        )
