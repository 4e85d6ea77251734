from __future__ import annotations
from typing import Optional

from components.credentialstore.contracts import Constraints, UserRecord
from components.credentialstore.errors import ConstraintViolation, StoreUnavailable
from components.credentialstore.ports import UserStorePort
from components.socialcore.errors import (
    InvalidCredentials,
    StorageConflict,
    StorageUnavailable,
    UserExists,
)

from .config import AuthConfig
from .contracts import AuthResult, TokenClaims
from .passwords import PasswordHasher
from .tokens import TokenIssuer

EMAIL_TAKEN = "Email already registered"
HANDLE_TAKEN = "Handle already taken"


class AuthService:
    def __init__(
        self,
        *,
        users: UserStorePort,
        cfg: AuthConfig,
        tokens: Optional[TokenIssuer] = None,
        hasher: Optional[PasswordHasher] = None,
    ):
        self.users = users
        self.cfg = cfg
        self.tokens = tokens or TokenIssuer(cfg)
        self.hasher = hasher or PasswordHasher(iterations=cfg.password_iterations)

    # --------- Core operations ----------
    def register(self, *, email: str, handle: str, name: str, password: str) -> AuthResult:
        try:
            existing = self.users.find_user_by_email_or_handle(email=email, handle=handle)
        except StoreUnavailable as ex:
            raise StorageUnavailable() from ex
        if existing:
            # email wins when both collide
            raise UserExists(EMAIL_TAKEN if existing.email == email else HANDLE_TAKEN)

        password_hash = self.hasher.hash(password)
        try:
            user = self.users.create_user(email=email, handle=handle, name=name, password_hash=password_hash)
        except ConstraintViolation as ex:
            # a concurrent registration won the race past the lookup above
            if ex.constraint == Constraints.USER_EMAIL:
                raise UserExists(EMAIL_TAKEN) from ex
            if ex.constraint == Constraints.USER_HANDLE:
                raise UserExists(HANDLE_TAKEN) from ex
            raise StorageConflict() from ex
        except StoreUnavailable as ex:
            raise StorageUnavailable() from ex
        return self._issue_for_user(user)

    def login(self, *, email_or_handle: str, password: str) -> AuthResult:
        try:
            user = self.users.find_user_by_email_or_handle(email=email_or_handle, handle=email_or_handle)
        except StoreUnavailable as ex:
            raise StorageUnavailable() from ex
        if not user:
            raise InvalidCredentials()
        if not self.hasher.verify(password, user.password_hash):
            raise InvalidCredentials()
        return self._issue_for_user(user)

    def verify_token(self, token: str) -> TokenClaims:
        return self.tokens.verify(token)

    # --------- Helpers ----------
    def _issue_for_user(self, user: UserRecord) -> AuthResult:
        access_token = self.tokens.issue(TokenClaims(user_id=user.id, handle=user.handle))
        return AuthResult(
            user=user.to_account(),
            access_token=access_token,
            token_type="Bearer",
            expires_in=self.tokens.ttl_seconds,
        )
