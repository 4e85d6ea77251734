from __future__ import annotations
from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from components.socialcore.contracts import UserAccount, UserPublic


# ---------- Stored records ----------
class UserRecord(BaseModel):
    id: str
    email: str
    handle: str
    name: str
    password_hash: str
    created_at: datetime

    def to_public(self) -> UserPublic:
        return UserPublic(id=self.id, handle=self.handle, name=self.name, created_at=self.created_at)

    def to_account(self) -> UserAccount:
        return UserAccount(
            id=self.id, handle=self.handle, email=self.email, name=self.name, created_at=self.created_at
        )


class FollowRecord(BaseModel):
    follower_id: str
    following_id: str
    created_at: datetime


class PostRecord(BaseModel):
    id: str
    author_id: str
    text: str
    media_url: Optional[str] = None
    created_at: datetime


# ---------- Constraint names ----------
class Constraints:
    USER_EMAIL = "uq_users_email"
    USER_HANDLE = "uq_users_handle"
    FOLLOW_PAIR = "uq_follows_pair"
    FOLLOW_NO_SELF = "ck_follows_no_self"
    FOLLOW_USERS_FK = "fk_follows_users"
    POST_AUTHOR_FK = "fk_posts_author"
