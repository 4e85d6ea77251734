from __future__ import annotations
from typing import Optional, Protocol

from pydantic import AnyHttpUrl, constr

from components.credentialstore.ports import FollowStorePort, PostStorePort, UserStorePort
from components.socialcore.contracts import WireModel

MAX_POST_LENGTH = 2000


# ---------- Ports ----------
class FeedStorePort(UserStorePort, FollowStorePort, PostStorePort, Protocol):
    """Posts plus the user and follow reads needed to build pages and feeds."""


# ---------- Service I/O ----------
class CreatePostRequest(WireModel):
    text: constr(min_length=1, max_length=MAX_POST_LENGTH)
    media_url: Optional[AnyHttpUrl] = None
