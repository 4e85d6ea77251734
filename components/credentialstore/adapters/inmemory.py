from __future__ import annotations

import threading
import uuid
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from ..contracts import Constraints, FollowRecord, PostRecord, UserRecord
from ..errors import ConstraintViolation, RecordNotFound

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryCredentialStore:
    """
    Deterministic, test-friendly adapter.
    Enforces the same constraints as the SQL schema under one coarse lock,
    so concurrent duplicate writes resolve exactly like a database would.
    """

    def __init__(self, clock: Optional[Clock] = None) -> None:
        self._lock = threading.RLock()
        self._now = clock or _utcnow
        self._users: Dict[str, UserRecord] = {}
        self._user_id_by_email: Dict[str, str] = {}
        self._user_id_by_handle: Dict[str, str] = {}
        self._follows: Dict[Tuple[str, str], FollowRecord] = {}
        self._posts: Dict[str, PostRecord] = {}

    # -------- Users --------

    def create_user(self, *, email: str, handle: str, name: str, password_hash: str) -> UserRecord:
        with self._lock:
            if email in self._user_id_by_email:
                raise ConstraintViolation(Constraints.USER_EMAIL)
            if handle in self._user_id_by_handle:
                raise ConstraintViolation(Constraints.USER_HANDLE)
            user = UserRecord(
                id=str(uuid.uuid4()),
                email=email,
                handle=handle,
                name=name,
                password_hash=password_hash,
                created_at=self._now(),
            )
            self._users[user.id] = user
            self._user_id_by_email[email] = user.id
            self._user_id_by_handle[handle] = user.id
            return user

    def get_user(self, user_id: str) -> Optional[UserRecord]:
        with self._lock:
            return self._users.get(user_id)

    def get_users(self, user_ids: Sequence[str]) -> Dict[str, UserRecord]:
        with self._lock:
            return {uid: self._users[uid] for uid in set(user_ids) if uid in self._users}

    def find_user_by_email_or_handle(self, *, email: str, handle: str) -> Optional[UserRecord]:
        with self._lock:
            uid = self._user_id_by_email.get(email) or self._user_id_by_handle.get(handle)
            return self._users.get(uid) if uid else None

    # -------- Follows --------

    def create_follow(self, follower_id: str, following_id: str) -> FollowRecord:
        with self._lock:
            if follower_id == following_id:
                raise ConstraintViolation(Constraints.FOLLOW_NO_SELF)
            if follower_id not in self._users or following_id not in self._users:
                raise ConstraintViolation(Constraints.FOLLOW_USERS_FK)
            key = (follower_id, following_id)
            if key in self._follows:
                raise ConstraintViolation(Constraints.FOLLOW_PAIR)
            edge = FollowRecord(follower_id=follower_id, following_id=following_id, created_at=self._now())
            self._follows[key] = edge
            return edge

    def get_follow(self, follower_id: str, following_id: str) -> Optional[FollowRecord]:
        with self._lock:
            return self._follows.get((follower_id, following_id))

    def delete_follow(self, follower_id: str, following_id: str) -> None:
        with self._lock:
            if self._follows.pop((follower_id, following_id), None) is None:
                raise RecordNotFound(f"follow {follower_id}->{following_id}")

    def list_followers(self, user_id: str, *, offset: int, limit: int) -> List[UserRecord]:
        with self._lock:
            edges = [e for e in self._follows.values() if e.following_id == user_id]
            return self._page_users(edges, lambda e: e.follower_id, offset, limit)

    def count_followers(self, user_id: str) -> int:
        with self._lock:
            return sum(1 for e in self._follows.values() if e.following_id == user_id)

    def list_following(self, user_id: str, *, offset: int, limit: int) -> List[UserRecord]:
        with self._lock:
            edges = [e for e in self._follows.values() if e.follower_id == user_id]
            return self._page_users(edges, lambda e: e.following_id, offset, limit)

    def count_following(self, user_id: str) -> int:
        with self._lock:
            return sum(1 for e in self._follows.values() if e.follower_id == user_id)

    def list_following_ids(self, user_id: str) -> List[str]:
        with self._lock:
            return [e.following_id for e in self._follows.values() if e.follower_id == user_id]

    def _page_users(self, edges: List[FollowRecord], pick: Callable[[FollowRecord], str], offset: int, limit: int) -> List[UserRecord]:
        edges.sort(key=lambda e: (e.created_at, pick(e)), reverse=True)
        return [self._users[pick(e)] for e in edges[offset: offset + limit]]

    # -------- Posts --------

    def create_post(self, *, author_id: str, text: str, media_url: Optional[str] = None) -> PostRecord:
        with self._lock:
            if author_id not in self._users:
                raise ConstraintViolation(Constraints.POST_AUTHOR_FK)
            post = PostRecord(
                id=str(uuid.uuid4()),
                author_id=author_id,
                text=text,
                media_url=media_url,
                created_at=self._now(),
            )
            self._posts[post.id] = post
            return post

    def get_post(self, post_id: str) -> Optional[PostRecord]:
        with self._lock:
            return self._posts.get(post_id)

    def list_posts_by_authors(self, author_ids: Sequence[str], *, offset: int, limit: int) -> List[PostRecord]:
        wanted = set(author_ids)
        with self._lock:
            posts = [p for p in self._posts.values() if p.author_id in wanted]
        posts.sort(key=lambda p: (p.created_at, p.id), reverse=True)
        return posts[offset: offset + limit]

    def count_posts_by_authors(self, author_ids: Sequence[str]) -> int:
        wanted = set(author_ids)
        with self._lock:
            return sum(1 for p in self._posts.values() if p.author_id in wanted)
