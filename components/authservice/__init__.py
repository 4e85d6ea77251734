# 66696c657374617274 ./components/authservice/__init__.py
from .service import AuthService
from .crypto import HS256TokenSigner
from .passwords import PasswordHasher
from .tokens import TokenIssuer, SystemClock
from .config import AuthConfig
from .contracts import TokenClaims, AuthResult
from .deps import get_auth_service, require_identity
from .routes import router as auth_router

__all__ = [
    "AuthService",
    "HS256TokenSigner",
    "PasswordHasher",
    "TokenIssuer",
    "SystemClock",
    "AuthConfig",
    "TokenClaims",
    "AuthResult",
    "get_auth_service",
    "require_identity",
    "auth_router",
]
