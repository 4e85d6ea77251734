from __future__ import annotations

from typing import List, Optional

from components.credentialstore.contracts import Constraints, PostRecord
from components.credentialstore.errors import ConstraintViolation, StoreUnavailable
from components.socialcore.contracts import Page, PostView
from components.socialcore.errors import (
    InternalError,
    PostNotFound,
    StorageConflict,
    StorageUnavailable,
    UserNotFound,
)

from .contracts import FeedStorePort


class FeedService:
    """
    Posts and the recency feed.

    The feed of a viewer is every post authored by the viewer or by anyone
    the viewer follows, newest first (ties broken by post id).
    """

    def __init__(self, store: FeedStorePort) -> None:
        self.store = store

    def create_post(self, author_id: str, text: str, media_url: Optional[str] = None) -> PostView:
        # author_id comes from a verified token; the store's foreign key is the only check
        try:
            post = self.store.create_post(author_id=author_id, text=text, media_url=media_url)
            return self._hydrate([post])[0]
        except ConstraintViolation as ex:
            if ex.constraint == Constraints.POST_AUTHOR_FK:
                raise UserNotFound() from ex
            raise StorageConflict() from ex
        except StoreUnavailable as ex:
            raise StorageUnavailable() from ex

    def get_post(self, post_id: str) -> PostView:
        try:
            post = self.store.get_post(post_id)
            if not post:
                raise PostNotFound()
            return self._hydrate([post])[0]
        except StoreUnavailable as ex:
            raise StorageUnavailable() from ex

    def list_user_posts(self, user_id: str, offset: int, limit: int) -> Page[PostView]:
        try:
            if not self.store.get_user(user_id):
                raise UserNotFound()
            return self._page([user_id], offset, limit)
        except StoreUnavailable as ex:
            raise StorageUnavailable() from ex

    def get_feed(self, viewer_id: str, offset: int, limit: int) -> Page[PostView]:
        try:
            following = self.store.list_following_ids(viewer_id)
            author_ids = [viewer_id] + [uid for uid in following if uid != viewer_id]
            return self._page(author_ids, offset, limit)
        except StoreUnavailable as ex:
            raise StorageUnavailable() from ex

    # --------- Helpers ----------
    def _page(self, author_ids: List[str], offset: int, limit: int) -> Page[PostView]:
        posts = self.store.list_posts_by_authors(author_ids, offset=offset, limit=limit)
        total = self.store.count_posts_by_authors(author_ids)
        return Page[PostView](items=self._hydrate(posts), offset=offset, limit=limit, total=total)

    def _hydrate(self, posts: List[PostRecord]) -> List[PostView]:
        authors = self.store.get_users([p.author_id for p in posts])
        views: List[PostView] = []
        for p in posts:
            author = authors.get(p.author_id)
            if author is None:
                # posts.author_id is a foreign key; a miss means the store is inconsistent
                raise InternalError(f"Author {p.author_id} missing for post {p.id}")
            views.append(
                PostView(
                    id=p.id,
                    text=p.text,
                    media_url=p.media_url,
                    created_at=p.created_at,
                    author=author.to_public(),
                )
            )
        return views
