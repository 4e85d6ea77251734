from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
import threading

import pytest

from components.authservice import AuthService
from components.credentialstore import ConstraintViolation, Constraints, RecordNotFound
from components.credentialstore.adapters import SqlCredentialStore, create_store_engine, init_schema
from components.feedservice import FeedService
from components.socialcore.errors import AlreadyFollowing, InvalidOperation, UserExists, UserNotFound
from components.socialgraph import SocialGraphService

from conftest import make_ticking_clock


@pytest.fixture
def sql_store():
    engine = create_store_engine("sqlite://")
    init_schema(engine)
    yield SqlCredentialStore(engine, clock=make_ticking_clock())
    engine.dispose()


def _user(store, handle):
    return store.create_user(email=f"{handle}@example.com", handle=handle, name=handle.title(), password_hash="x")


def test_user_round_trip_keeps_utc(sql_store):
    created = _user(sql_store, "alice")
    fetched = sql_store.get_user(created.id)
    assert fetched == created
    assert fetched.created_at.tzinfo is not None


@pytest.mark.parametrize(
    "email,handle,constraint",
    [
        ("alice@example.com", "other", Constraints.USER_EMAIL),
        ("other@example.com", "alice", Constraints.USER_HANDLE),
    ],
)
def test_user_uniqueness_is_named(sql_store, email, handle, constraint):
    _user(sql_store, "alice")
    with pytest.raises(ConstraintViolation) as ei:
        sql_store.create_user(email=email, handle=handle, name="X", password_hash="x")
    assert ei.value.constraint == constraint


def test_find_user_prefers_email_match(sql_store):
    alice = _user(sql_store, "alice")
    _user(sql_store, "bob")
    found = sql_store.find_user_by_email_or_handle(email="alice@example.com", handle="bob")
    assert found.id == alice.id
    assert sql_store.find_user_by_email_or_handle(email="none@example.com", handle="none") is None


def test_get_users_skips_unknown_ids(sql_store):
    alice = _user(sql_store, "alice")
    assert set(sql_store.get_users([alice.id, "missing", alice.id])) == {alice.id}
    assert sql_store.get_users([]) == {}


def test_follow_constraints_are_named(sql_store):
    a, b = _user(sql_store, "alice"), _user(sql_store, "bob")
    sql_store.create_follow(a.id, b.id)

    with pytest.raises(ConstraintViolation) as dup:
        sql_store.create_follow(a.id, b.id)
    assert dup.value.constraint == Constraints.FOLLOW_PAIR

    with pytest.raises(ConstraintViolation) as self_edge:
        sql_store.create_follow(a.id, a.id)
    assert self_edge.value.constraint == Constraints.FOLLOW_NO_SELF

    with pytest.raises(ConstraintViolation) as dangling:
        sql_store.create_follow(a.id, "missing")
    assert dangling.value.constraint == Constraints.FOLLOW_USERS_FK


def test_delete_missing_follow(sql_store):
    a, b = _user(sql_store, "alice"), _user(sql_store, "bob")
    with pytest.raises(RecordNotFound):
        sql_store.delete_follow(a.id, b.id)
    sql_store.create_follow(a.id, b.id)
    sql_store.delete_follow(a.id, b.id)
    assert sql_store.get_follow(a.id, b.id) is None


def test_post_author_must_exist(sql_store):
    with pytest.raises(ConstraintViolation) as ei:
        sql_store.create_post(author_id="missing", text="hi")
    assert ei.value.constraint == Constraints.POST_AUTHOR_FK


def test_listings_order_and_counts(sql_store):
    target = _user(sql_store, "target")
    fans = [_user(sql_store, h) for h in ("f1", "f2", "f3")]
    for fan in fans:
        sql_store.create_follow(fan.id, target.id)

    assert [u.handle for u in sql_store.list_followers(target.id, offset=0, limit=10)] == ["f3", "f2", "f1"]
    assert [u.handle for u in sql_store.list_followers(target.id, offset=1, limit=1)] == ["f2"]
    assert sql_store.count_followers(target.id) == 3
    assert [u.handle for u in sql_store.list_following(fans[0].id, offset=0, limit=10)] == ["target"]
    assert sql_store.list_following_ids(fans[0].id) == [target.id]

    for i in range(3):
        sql_store.create_post(author_id=fans[i].id, text=f"p{i}")
    ids = [fans[0].id, fans[2].id]
    assert [p.text for p in sql_store.list_posts_by_authors(ids, offset=0, limit=10)] == ["p2", "p0"]
    assert sql_store.count_posts_by_authors(ids) == 2
    assert sql_store.list_posts_by_authors([], offset=0, limit=10) == []


def test_services_over_sql_store(sql_store, auth_cfg):
    auth = AuthService(users=sql_store, cfg=auth_cfg)
    graph = SocialGraphService(sql_store)
    feed = FeedService(sql_store)

    a = auth.register(email="a@example.com", handle="a_user", name="A", password="password123").user
    b = auth.register(email="b@example.com", handle="b_user", name="B", password="password123").user
    c = auth.register(email="c@example.com", handle="c_user", name="C", password="password123").user
    with pytest.raises(UserExists):
        auth.register(email="a@example.com", handle="fresh", name="A", password="password123")

    graph.follow(a.id, b.id)
    graph.follow(a.id, c.id)
    graph.follow(b.id, a.id)
    with pytest.raises(AlreadyFollowing):
        graph.follow(a.id, b.id)
    with pytest.raises(InvalidOperation):
        graph.follow(a.id, a.id)
    with pytest.raises(UserNotFound):
        graph.follow(a.id, "missing")

    for author, text in ((a, "p1"), (b, "p2"), (c, "p3"), (a, "p4")):
        feed.create_post(author.id, text)

    assert [p.text for p in feed.get_feed(a.id, 0, 20).items] == ["p4", "p3", "p2", "p1"]
    assert [p.text for p in feed.get_feed(c.id, 0, 20).items] == ["p3"]
    assert auth.login(email_or_handle="b_user", password="password123").user.id == b.id


class StaleReadSqlStore(SqlCredentialStore):
    """Edge lookups always miss, so every caller reaches the insert."""

    def get_follow(self, follower_id, following_id):
        return None


def test_identical_timestamps_break_ties_by_id():
    engine = create_store_engine("sqlite://")
    init_schema(engine)
    instant = datetime(2024, 1, 1, tzinfo=timezone.utc)
    store = SqlCredentialStore(engine, clock=lambda: instant)

    alice = _user(store, "alice")
    fans = [_user(store, h) for h in ("f1", "f2", "f3", "f4")]
    for fan in fans:
        store.create_follow(fan.id, alice.id)
    posts = [store.create_post(author_id=alice.id, text=f"p{i}") for i in range(5)]

    expected_posts = sorted((p.id for p in posts), reverse=True)
    first = store.list_posts_by_authors([alice.id], offset=0, limit=2)
    rest = store.list_posts_by_authors([alice.id], offset=2, limit=10)
    assert [p.id for p in first + rest] == expected_posts

    expected_fans = sorted((f.id for f in fans), reverse=True)
    assert [u.id for u in store.list_followers(alice.id, offset=0, limit=10)] == expected_fans
    engine.dispose()


def test_concurrent_duplicate_follows_converge_to_one_row(tmp_path):
    engine = create_store_engine(f"sqlite:///{tmp_path / 'social.db'}")
    init_schema(engine)
    store = StaleReadSqlStore(engine)
    svc = SocialGraphService(store)
    a, b = _user(store, "alice"), _user(store, "bob")

    workers = 8
    barrier = threading.Barrier(workers)

    def attempt(_):
        barrier.wait()
        try:
            svc.follow(a.id, b.id)
            return "created"
        except AlreadyFollowing:
            return "already"

    with ThreadPoolExecutor(max_workers=workers) as pool:
        outcomes = list(pool.map(attempt, range(workers)))

    assert outcomes.count("created") == 1
    assert outcomes.count("already") == workers - 1
    assert store.count_followers(b.id) == 1
    engine.dispose()
