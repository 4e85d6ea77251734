from __future__ import annotations
from typing import Protocol

from pydantic import BaseModel

from components.credentialstore.ports import FollowStorePort, UserStorePort


# ---------- Ports ----------
class GraphStorePort(UserStorePort, FollowStorePort, Protocol):
    """The slice of the credential store the graph service reads and writes."""


# ---------- Service I/O ----------
class FollowResult(BaseModel):
    message: str
