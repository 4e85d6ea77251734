"""
Shared projections, pagination and the closed domain error set.
"""

from .contracts import (
    UserPublic,
    UserAccount,
    PostView,
    Page,
    WireModel,
    PageRequest,
    DEFAULT_PAGE_LIMIT,
    MAX_PAGE_LIMIT,
)
from .errors import (
    ErrorKind,
    SocialError,
    ValidationFailed,
    UserExists,
    UserNotFound,
    PostNotFound,
    InvalidCredentials,
    InvalidToken,
    TokenExpired,
    InvalidOperation,
    AlreadyFollowing,
    NotFollowing,
    StorageConflict,
    StorageUnavailable,
    InternalError,
)
