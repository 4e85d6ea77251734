# 66696c657374617274 ./conftest.py
from datetime import datetime, timedelta, timezone
from pathlib import Path
import sys

import pytest

# Ensure project root is on sys.path before tests import modules
ROOT = Path(__file__).resolve().parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from components.authservice import AuthConfig, AuthService  # noqa: E402
from components.credentialstore import InMemoryCredentialStore  # noqa: E402
from components.feedservice import FeedService  # noqa: E402
from components.socialgraph import SocialGraphService  # noqa: E402

TEST_SECRET = "test-secret"


def make_ticking_clock(start=None, step=timedelta(seconds=1)):
    """Every call returns a strictly later instant, so creation order is unambiguous."""
    t = {"now": start or datetime(2024, 1, 1, tzinfo=timezone.utc)}

    def now():
        t["now"] += step
        return t["now"]

    return now


@pytest.fixture
def auth_cfg():
    # low work factor keeps hashing fast under test
    return AuthConfig(secret=TEST_SECRET, password_iterations=1_000)


@pytest.fixture
def store():
    return InMemoryCredentialStore(clock=make_ticking_clock())


@pytest.fixture
def auth(store, auth_cfg):
    return AuthService(users=store, cfg=auth_cfg)


@pytest.fixture
def graph(store):
    return SocialGraphService(store)


@pytest.fixture
def feed(store):
    return FeedService(store)


@pytest.fixture
def make_user(auth):
    def _make(handle, password="password123"):
        return auth.register(email=f"{handle}@example.com", handle=handle, name=handle.title(), password=password).user
    return _make
