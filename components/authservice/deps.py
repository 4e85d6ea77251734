from typing import Optional

from fastapi import Depends, Header, Request

from components.socialcore.errors import InvalidToken

from .contracts import TokenClaims
from .service import AuthService


def get_auth_service(request: Request) -> AuthService:
    """AuthService wired onto the application at bootstrap."""
    return request.app.state.auth_service


def get_authorization_header(authorization: Optional[str] = Header(default=None, alias="Authorization")) -> Optional[str]:
    """
    Extract the Authorization header value (e.g., 'Bearer <token>').
    Using Header() ensures we get a plain string during real FastAPI requests.
    """
    return authorization


def require_identity(
    auth: AuthService = Depends(get_auth_service),
    authorization: Optional[str] = Depends(get_authorization_header),
) -> TokenClaims:
    """Verified {user_id, handle} of the caller; InvalidToken/TokenExpired otherwise."""
    if not authorization or not authorization.lower().startswith("bearer "):
        raise InvalidToken("No token provided")
    token = authorization.split(" ", 1)[1].strip()
    return auth.verify_token(token)
