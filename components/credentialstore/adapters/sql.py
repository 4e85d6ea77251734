"""
SQLAlchemy-backed credential store.

One short transaction per call. Database constraint violations come back as
ConstraintViolation carrying the schema's constraint name; connection-level
failures come back as StoreUnavailable.
"""
from __future__ import annotations

import logging
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Callable, Dict, Iterator, List, Optional, Sequence, Tuple

from sqlalchemy import case, create_engine, delete, event, func, or_, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from ..contracts import Constraints, FollowRecord, PostRecord, UserRecord
from ..errors import ConstraintViolation, RecordNotFound, StoreUnavailable
from .sql_models import Base, FollowRow, PostRow, UserRow

logger = logging.getLogger("social.credentialstore")

Clock = Callable[[], datetime]

# (constraint, markers found in driver messages) per table, checked in order
_USER_CONSTRAINTS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    (Constraints.USER_EMAIL, ("uq_users_email", "users.email")),
    (Constraints.USER_HANDLE, ("uq_users_handle", "users.handle")),
)
_FOLLOW_CONSTRAINTS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    (Constraints.FOLLOW_NO_SELF, ("ck_follows_no_self",)),
    (Constraints.FOLLOW_USERS_FK, ("fk_follows", "foreign key")),
    (Constraints.FOLLOW_PAIR, ("pk_follows", "follows.follower_id", "unique", "duplicate")),
)
_POST_CONSTRAINTS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    (Constraints.POST_AUTHOR_FK, ("fk_posts_author", "foreign key")),
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _enable_sqlite_fks(dbapi_conn, _record) -> None:
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_store_engine(url: str, *, echo: bool = False) -> Engine:
    """Build an engine; SQLite gets foreign keys on and, in memory, a shared connection."""
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:") or "mode=memory" in url:
            kwargs["poolclass"] = StaticPool
        engine = create_engine(url, echo=echo, **kwargs)
        event.listen(engine, "connect", _enable_sqlite_fks)
        return engine
    return create_engine(url, echo=echo, pool_pre_ping=True, pool_size=20, max_overflow=10)


def init_schema(engine: Engine) -> None:
    """Create all tables if they don't exist (idempotent)."""
    Base.metadata.create_all(engine)
    logger.info("credentialstore.schema_ready url=%s", engine.url.render_as_string(hide_password=True))


def _classify(exc: IntegrityError, candidates: Tuple[Tuple[str, Tuple[str, ...]], ...]) -> ConstraintViolation:
    text = str(exc.orig).lower()
    for name, markers in candidates:
        if any(m in text for m in markers):
            return ConstraintViolation(name, str(exc.orig))
    return ConstraintViolation("unknown", str(exc.orig))


class SqlCredentialStore:
    def __init__(self, engine: Engine, clock: Optional[Clock] = None) -> None:
        self._engine = engine
        self._sessions = sessionmaker(bind=engine, expire_on_commit=False)
        self._now = clock or _utcnow

    @contextmanager
    def _session(self) -> Iterator[Session]:
        try:
            with self._sessions.begin() as session:
                yield session
        except OperationalError as exc:
            logger.warning("credentialstore.unavailable error=%s", exc.orig)
            raise StoreUnavailable(str(exc.orig)) from exc

    # -------- Users --------

    def create_user(self, *, email: str, handle: str, name: str, password_hash: str) -> UserRecord:
        row = UserRow(
            id=str(uuid.uuid4()),
            email=email,
            handle=handle,
            name=name,
            password_hash=password_hash,
            created_at=self._now(),
        )
        try:
            with self._session() as session:
                session.add(row)
        except IntegrityError as exc:
            raise _classify(exc, _USER_CONSTRAINTS) from exc
        logger.debug("credentialstore.user_created id=%s", row.id)
        return UserRecord.model_validate(row, from_attributes=True)

    def get_user(self, user_id: str) -> Optional[UserRecord]:
        with self._session() as session:
            row = session.get(UserRow, user_id)
            return UserRecord.model_validate(row, from_attributes=True) if row else None

    def get_users(self, user_ids: Sequence[str]) -> Dict[str, UserRecord]:
        if not user_ids:
            return {}
        with self._session() as session:
            rows = session.scalars(select(UserRow).where(UserRow.id.in_(list(set(user_ids)))))
            return {r.id: UserRecord.model_validate(r, from_attributes=True) for r in rows}

    def find_user_by_email_or_handle(self, *, email: str, handle: str) -> Optional[UserRecord]:
        stmt = (
            select(UserRow)
            .where(or_(UserRow.email == email, UserRow.handle == handle))
            # an email match outranks a handle match on another row
            .order_by(case((UserRow.email == email, 0), else_=1))
            .limit(1)
        )
        with self._session() as session:
            row = session.scalars(stmt).first()
            return UserRecord.model_validate(row, from_attributes=True) if row else None

    # -------- Follows --------

    def create_follow(self, follower_id: str, following_id: str) -> FollowRecord:
        row = FollowRow(follower_id=follower_id, following_id=following_id, created_at=self._now())
        try:
            with self._session() as session:
                session.add(row)
        except IntegrityError as exc:
            raise _classify(exc, _FOLLOW_CONSTRAINTS) from exc
        return FollowRecord.model_validate(row, from_attributes=True)

    def get_follow(self, follower_id: str, following_id: str) -> Optional[FollowRecord]:
        with self._session() as session:
            row = session.get(FollowRow, (follower_id, following_id))
            return FollowRecord.model_validate(row, from_attributes=True) if row else None

    def delete_follow(self, follower_id: str, following_id: str) -> None:
        stmt = delete(FollowRow).where(
            FollowRow.follower_id == follower_id,
            FollowRow.following_id == following_id,
        )
        with self._session() as session:
            result = session.execute(stmt)
            if result.rowcount == 0:
                raise RecordNotFound(f"follow {follower_id}->{following_id}")

    def list_followers(self, user_id: str, *, offset: int, limit: int) -> List[UserRecord]:
        stmt = (
            select(UserRow)
            .join(FollowRow, FollowRow.follower_id == UserRow.id)
            .where(FollowRow.following_id == user_id)
            .order_by(FollowRow.created_at.desc(), UserRow.id.desc())
            .offset(offset)
            .limit(limit)
        )
        return self._users(stmt)

    def count_followers(self, user_id: str) -> int:
        return self._count(select(func.count()).select_from(FollowRow).where(FollowRow.following_id == user_id))

    def list_following(self, user_id: str, *, offset: int, limit: int) -> List[UserRecord]:
        stmt = (
            select(UserRow)
            .join(FollowRow, FollowRow.following_id == UserRow.id)
            .where(FollowRow.follower_id == user_id)
            .order_by(FollowRow.created_at.desc(), UserRow.id.desc())
            .offset(offset)
            .limit(limit)
        )
        return self._users(stmt)

    def count_following(self, user_id: str) -> int:
        return self._count(select(func.count()).select_from(FollowRow).where(FollowRow.follower_id == user_id))

    def list_following_ids(self, user_id: str) -> List[str]:
        with self._session() as session:
            return list(session.scalars(select(FollowRow.following_id).where(FollowRow.follower_id == user_id)))

    # -------- Posts --------

    def create_post(self, *, author_id: str, text: str, media_url: Optional[str] = None) -> PostRecord:
        row = PostRow(
            id=str(uuid.uuid4()),
            author_id=author_id,
            text=text,
            media_url=media_url,
            created_at=self._now(),
        )
        try:
            with self._session() as session:
                session.add(row)
        except IntegrityError as exc:
            raise _classify(exc, _POST_CONSTRAINTS) from exc
        logger.debug("credentialstore.post_created id=%s author=%s", row.id, author_id)
        return PostRecord.model_validate(row, from_attributes=True)

    def get_post(self, post_id: str) -> Optional[PostRecord]:
        with self._session() as session:
            row = session.get(PostRow, post_id)
            return PostRecord.model_validate(row, from_attributes=True) if row else None

    def list_posts_by_authors(self, author_ids: Sequence[str], *, offset: int, limit: int) -> List[PostRecord]:
        if not author_ids:
            return []
        stmt = (
            select(PostRow)
            .where(PostRow.author_id.in_(list(set(author_ids))))
            .order_by(PostRow.created_at.desc(), PostRow.id.desc())
            .offset(offset)
            .limit(limit)
        )
        with self._session() as session:
            return [PostRecord.model_validate(r, from_attributes=True) for r in session.scalars(stmt)]

    def count_posts_by_authors(self, author_ids: Sequence[str]) -> int:
        if not author_ids:
            return 0
        return self._count(
            select(func.count()).select_from(PostRow).where(PostRow.author_id.in_(list(set(author_ids))))
        )

    # -------- Helpers --------

    def _users(self, stmt) -> List[UserRecord]:
        with self._session() as session:
            return [UserRecord.model_validate(r, from_attributes=True) for r in session.scalars(stmt)]

    def _count(self, stmt) -> int:
        with self._session() as session:
            return int(session.scalar(stmt) or 0)
