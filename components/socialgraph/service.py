from __future__ import annotations

from components.credentialstore.contracts import Constraints
from components.credentialstore.errors import ConstraintViolation, RecordNotFound, StoreUnavailable
from components.socialcore.contracts import Page, UserPublic
from components.socialcore.errors import (
    AlreadyFollowing,
    InvalidOperation,
    NotFollowing,
    StorageConflict,
    StorageUnavailable,
    UserNotFound,
)

from .contracts import GraphStorePort


class SocialGraphService:
    """
    Follow/unfollow edges and follower/following listings.

    Pre-checks only produce friendlier errors; the store's write is the
    authority and its violations are remapped to the same domain outcome.
    """

    def __init__(self, store: GraphStorePort) -> None:
        self.store = store

    def get_public_profile(self, user_id: str) -> UserPublic:
        try:
            user = self.store.get_user(user_id)
        except StoreUnavailable as ex:
            raise StorageUnavailable() from ex
        if not user:
            raise UserNotFound()
        return user.to_public()

    def follow(self, follower_id: str, target_id: str) -> None:
        if follower_id == target_id:
            raise InvalidOperation("Cannot follow yourself")
        try:
            if not self.store.get_user(target_id):
                raise UserNotFound()
            if self.store.get_follow(follower_id, target_id):
                raise AlreadyFollowing()
            self.store.create_follow(follower_id, target_id)
        except ConstraintViolation as ex:
            if ex.constraint == Constraints.FOLLOW_PAIR:
                raise AlreadyFollowing() from ex
            if ex.constraint == Constraints.FOLLOW_USERS_FK:
                raise UserNotFound() from ex
            if ex.constraint == Constraints.FOLLOW_NO_SELF:
                raise InvalidOperation("Cannot follow yourself") from ex
            raise StorageConflict() from ex
        except StoreUnavailable as ex:
            raise StorageUnavailable() from ex

    def unfollow(self, follower_id: str, target_id: str) -> None:
        if follower_id == target_id:
            raise InvalidOperation("Cannot unfollow yourself")
        try:
            if not self.store.get_follow(follower_id, target_id):
                raise NotFollowing()
            self.store.delete_follow(follower_id, target_id)
        except RecordNotFound as ex:
            raise NotFollowing() from ex
        except StoreUnavailable as ex:
            raise StorageUnavailable() from ex

    def list_followers(self, user_id: str, offset: int, limit: int) -> Page[UserPublic]:
        try:
            self._require_user(user_id)
            users = self.store.list_followers(user_id, offset=offset, limit=limit)
            total = self.store.count_followers(user_id)
        except StoreUnavailable as ex:
            raise StorageUnavailable() from ex
        return Page[UserPublic](items=[u.to_public() for u in users], offset=offset, limit=limit, total=total)

    def list_following(self, user_id: str, offset: int, limit: int) -> Page[UserPublic]:
        try:
            self._require_user(user_id)
            users = self.store.list_following(user_id, offset=offset, limit=limit)
            total = self.store.count_following(user_id)
        except StoreUnavailable as ex:
            raise StorageUnavailable() from ex
        return Page[UserPublic](items=[u.to_public() for u in users], offset=offset, limit=limit, total=total)

    def _require_user(self, user_id: str) -> None:
        if not self.store.get_user(user_id):
            raise UserNotFound()
