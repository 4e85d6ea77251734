from __future__ import annotations
from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    VALIDATION_FAILED = "VALIDATION_FAILED"
    USER_EXISTS = "USER_EXISTS"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    POST_NOT_FOUND = "POST_NOT_FOUND"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    INVALID_TOKEN = "INVALID_TOKEN"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"
    INVALID_OPERATION = "INVALID_OPERATION"
    ALREADY_FOLLOWING = "ALREADY_FOLLOWING"
    NOT_FOLLOWING = "NOT_FOLLOWING"
    STORAGE_CONFLICT = "STORAGE_CONFLICT"
    STORAGE_UNAVAILABLE = "STORAGE_UNAVAILABLE"
    INTERNAL = "INTERNAL"


class SocialError(Exception):
    """Base for every domain error raised by the core.

    Subclasses pin ``kind`` and a default ``message``; the transport layer
    maps ``kind`` to a response code.
    """
    kind: ErrorKind = ErrorKind.INTERNAL
    message: str = "Internal error"

    def __init__(self, message: Optional[str] = None, *, details: Optional[Dict[str, Any]] = None):
        self.message = message or self.message
        self.details = details
        super().__init__(self.message)

    def to_payload(self) -> Dict[str, Any]:
        return {
            "code": self.kind.value,
            "message": self.message,
            "details": self.details or {},
        }


class ValidationFailed(SocialError):
    kind = ErrorKind.VALIDATION_FAILED
    message = "Validation failed"


class UserExists(SocialError):
    kind = ErrorKind.USER_EXISTS
    message = "User already exists"


class UserNotFound(SocialError):
    kind = ErrorKind.USER_NOT_FOUND
    message = "User not found"


class PostNotFound(SocialError):
    kind = ErrorKind.POST_NOT_FOUND
    message = "Post not found"


class InvalidCredentials(SocialError):
    kind = ErrorKind.INVALID_CREDENTIALS
    message = "Invalid credentials"


class InvalidToken(SocialError):
    kind = ErrorKind.INVALID_TOKEN
    message = "Invalid token"


class TokenExpired(SocialError):
    kind = ErrorKind.TOKEN_EXPIRED
    message = "Token expired"


class InvalidOperation(SocialError):
    kind = ErrorKind.INVALID_OPERATION
    message = "Invalid operation"


class AlreadyFollowing(SocialError):
    kind = ErrorKind.ALREADY_FOLLOWING
    message = "Already following this user"


class NotFollowing(SocialError):
    kind = ErrorKind.NOT_FOLLOWING
    message = "Not following this user"


class StorageConflict(SocialError):
    kind = ErrorKind.STORAGE_CONFLICT
    message = "Resource already exists"


class StorageUnavailable(SocialError):
    """Transient infrastructure failure; callers may retry."""
    kind = ErrorKind.STORAGE_UNAVAILABLE
    message = "Storage temporarily unavailable"

    def to_payload(self) -> Dict[str, Any]:
        payload = super().to_payload()
        payload["details"] = {**payload["details"], "retryable": True}
        return payload


class InternalError(SocialError):
    kind = ErrorKind.INTERNAL
    message = "Internal error"
