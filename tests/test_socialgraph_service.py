from concurrent.futures import ThreadPoolExecutor
import threading

import pytest

from components.credentialstore import InMemoryCredentialStore, RecordNotFound
from components.socialcore.errors import (
    AlreadyFollowing,
    InvalidOperation,
    NotFollowing,
    UserNotFound,
)
from components.socialgraph import SocialGraphService

from conftest import make_ticking_clock


class StaleReadStore(InMemoryCredentialStore):
    """Edge lookups always miss, so every caller proceeds to the write."""

    def get_follow(self, follower_id, following_id):
        return None


class VanishingEdgeStore(InMemoryCredentialStore):
    """The edge is seen by the lookup but gone by the time the delete runs."""

    def delete_follow(self, follower_id, following_id):
        raise RecordNotFound(f"follow {follower_id}->{following_id}")


def test_public_profile_omits_private_fields(graph, make_user):
    alice = make_user("alice")
    profile = graph.get_public_profile(alice.id)
    assert profile.model_dump().keys() == {"id", "handle", "name", "created_at"}
    assert profile.handle == "alice"


def test_public_profile_unknown_user(graph):
    with pytest.raises(UserNotFound):
        graph.get_public_profile("missing")


@pytest.mark.parametrize("op", ["follow", "unfollow"])
def test_self_reference_is_invalid_even_for_unknown_user(graph, make_user, op):
    alice = make_user("alice")
    with pytest.raises(InvalidOperation):
        getattr(graph, op)(alice.id, alice.id)
    with pytest.raises(InvalidOperation):
        getattr(graph, op)("ghost", "ghost")


def test_follow_unknown_target(graph, make_user):
    alice = make_user("alice")
    with pytest.raises(UserNotFound):
        graph.follow(alice.id, "missing")


def test_follow_twice_then_unfollow_twice(graph, make_user):
    alice, bob = make_user("alice"), make_user("bob")

    graph.follow(alice.id, bob.id)
    with pytest.raises(AlreadyFollowing):
        graph.follow(alice.id, bob.id)

    graph.unfollow(alice.id, bob.id)
    with pytest.raises(NotFollowing):
        graph.unfollow(alice.id, bob.id)


def test_follow_is_directed(graph, make_user):
    alice, bob = make_user("alice"), make_user("bob")
    graph.follow(alice.id, bob.id)
    with pytest.raises(NotFollowing):
        graph.unfollow(bob.id, alice.id)


def _pair(store):
    a = store.create_user(email="a@example.com", handle="alice", name="A", password_hash="x")
    b = store.create_user(email="b@example.com", handle="bob", name="B", password_hash="x")
    return a, b


def test_duplicate_write_past_precheck_becomes_already_following():
    store = StaleReadStore()
    svc = SocialGraphService(store)
    a, b = _pair(store)

    svc.follow(a.id, b.id)
    with pytest.raises(AlreadyFollowing):
        svc.follow(a.id, b.id)
    assert store.count_following(a.id) == 1


def test_concurrent_duplicate_follows_converge_to_one_edge():
    store = StaleReadStore(clock=make_ticking_clock())
    svc = SocialGraphService(store)
    a, b = _pair(store)

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


def test_delete_race_becomes_not_following():
    store = VanishingEdgeStore()
    svc = SocialGraphService(store)
    a, b = _pair(store)
    store.create_follow(a.id, b.id)
    with pytest.raises(NotFollowing):
        svc.unfollow(a.id, b.id)


def test_listings_newest_edge_first_with_totals(graph, make_user):
    alice, bob, carol, dave = (make_user(h) for h in ("alice", "bob", "carol", "dave"))
    graph.follow(bob.id, alice.id)
    graph.follow(carol.id, alice.id)
    graph.follow(dave.id, alice.id)
    graph.follow(alice.id, dave.id)

    followers = graph.list_followers(alice.id, 0, 20)
    assert [u.handle for u in followers.items] == ["dave", "carol", "bob"]
    assert followers.total == 3
    assert (followers.offset, followers.limit) == (0, 20)

    page = graph.list_followers(alice.id, 1, 1)
    assert [u.handle for u in page.items] == ["carol"]
    assert page.total == 3

    following = graph.list_following(alice.id, 0, 20)
    assert [u.handle for u in following.items] == ["dave"]
    assert following.total == 1


def test_listing_offset_past_total_is_empty_not_error(graph, make_user):
    alice, bob = make_user("alice"), make_user("bob")
    graph.follow(bob.id, alice.id)
    page = graph.list_followers(alice.id, 10, 5)
    assert page.items == []
    assert page.total == 1


def test_listings_require_existing_user(graph):
    with pytest.raises(UserNotFound):
        graph.list_followers("missing", 0, 20)
    with pytest.raises(UserNotFound):
        graph.list_following("missing", 0, 20)
