#!/usr/bin/env python3
"""
Seed script: creates a small demo dataset in a SQL credential store.

Creates:
  - alice, bob, charlie (password: password123)
  - alice follows bob and charlie; bob follows alice
  - a few posts per user

Usage:
  python scripts/seed_demo.py --database-url sqlite:///./social.db --secret "$SOCIAL_AUTH_SECRET"
"""
from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from components.authservice import AuthConfig, AuthService  # noqa: E402
from components.credentialstore.adapters.sql import SqlCredentialStore, create_store_engine, init_schema  # noqa: E402
from components.feedservice import FeedService  # noqa: E402
from components.socialcore.errors import AlreadyFollowing, UserExists  # noqa: E402
from components.socialgraph import SocialGraphService  # noqa: E402

logger = logging.getLogger("social.seed")

DEMO_PASSWORD = "password123"

USERS = [
    ("alice@example.com", "alice", "Alice Johnson"),
    ("bob@example.com", "bob", "Bob Smith"),
    ("charlie@example.com", "charlie", "Charlie Brown"),
]

FOLLOWS = [("alice", "bob"), ("alice", "charlie"), ("bob", "alice")]

POSTS = [
    ("alice", "Hello world! This is my first post."),
    ("bob", "Just shipped a new feature. Zero downtime deploys are beautiful."),
    ("charlie", "Reading about feed architectures: fan-out on write vs pull on read."),
    ("alice", "Pagination with offset/limit is fine until it isn't."),
]


def seed(database_url: str, secret: str) -> None:
    engine = create_store_engine(database_url)
    init_schema(engine)
    store = SqlCredentialStore(engine)
    auth = AuthService(users=store, cfg=AuthConfig(secret=secret))
    graph = SocialGraphService(store)
    feed = FeedService(store)

    ids = {}
    for email, handle, name in USERS:
        try:
            ids[handle] = auth.register(email=email, handle=handle, name=name, password=DEMO_PASSWORD).user.id
            logger.info("seed.user_created handle=%s id=%s", handle, ids[handle])
        except UserExists:
            ids[handle] = auth.login(email_or_handle=handle, password=DEMO_PASSWORD).user.id
            logger.info("seed.user_exists handle=%s id=%s", handle, ids[handle])

    for follower, following in FOLLOWS:
        try:
            graph.follow(ids[follower], ids[following])
            logger.info("seed.follow %s -> %s", follower, following)
        except AlreadyFollowing:
            logger.info("seed.follow_exists %s -> %s", follower, following)

    for handle, text in POSTS:
        post = feed.create_post(ids[handle], text)
        logger.info("seed.post id=%s author=%s", post.id, handle)

    page = feed.get_feed(ids["alice"], 0, 20)
    logger.info("seed.done alice_feed_total=%d", page.total)


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed the social backend with demo data")
    parser.add_argument("--database-url", default=os.environ.get("SOCIAL_DATABASE_URL"))
    parser.add_argument("--secret", default=os.environ.get("SOCIAL_AUTH_SECRET"))
    args = parser.parse_args()
    if not args.database_url or not args.secret:
        parser.error("--database-url and --secret are required (or set SOCIAL_DATABASE_URL / SOCIAL_AUTH_SECRET)")

    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s - %(message)s")
    seed(args.database_url, args.secret)


if __name__ == "__main__":
    main()
