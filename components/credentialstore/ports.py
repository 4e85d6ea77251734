from __future__ import annotations

from typing import Dict, List, Optional, Protocol, Sequence

from .contracts import FollowRecord, PostRecord, UserRecord


class UserStorePort(Protocol):
    def create_user(self, *, email: str, handle: str, name: str, password_hash: str) -> UserRecord:
        """Raises ConstraintViolation(uq_users_email | uq_users_handle)."""
        ...

    def get_user(self, user_id: str) -> Optional[UserRecord]: ...

    def get_users(self, user_ids: Sequence[str]) -> Dict[str, UserRecord]: ...

    def find_user_by_email_or_handle(self, *, email: str, handle: str) -> Optional[UserRecord]:
        """Single lookup matching either field."""
        ...


class FollowStorePort(Protocol):
    def create_follow(self, follower_id: str, following_id: str) -> FollowRecord:
        """Raises ConstraintViolation(uq_follows_pair | ck_follows_no_self | fk_follows_users)."""
        ...

    def get_follow(self, follower_id: str, following_id: str) -> Optional[FollowRecord]: ...

    def delete_follow(self, follower_id: str, following_id: str) -> None:
        """Raises RecordNotFound when no edge exists."""
        ...

    # Listings are ordered by edge created_at desc, then listed user id desc.
    def list_followers(self, user_id: str, *, offset: int, limit: int) -> List[UserRecord]: ...

    def count_followers(self, user_id: str) -> int: ...

    def list_following(self, user_id: str, *, offset: int, limit: int) -> List[UserRecord]: ...

    def count_following(self, user_id: str) -> int: ...

    def list_following_ids(self, user_id: str) -> List[str]: ...


class PostStorePort(Protocol):
    def create_post(self, *, author_id: str, text: str, media_url: Optional[str] = None) -> PostRecord:
        """Raises ConstraintViolation(fk_posts_author) for an unknown author."""
        ...

    def get_post(self, post_id: str) -> Optional[PostRecord]: ...

    # Ordered by created_at desc, then id desc.
    def list_posts_by_authors(self, author_ids: Sequence[str], *, offset: int, limit: int) -> List[PostRecord]: ...

    def count_posts_by_authors(self, author_ids: Sequence[str]) -> int: ...


class CredentialStorePort(UserStorePort, FollowStorePort, PostStorePort, Protocol):
    """Everything the services need from durable storage."""
