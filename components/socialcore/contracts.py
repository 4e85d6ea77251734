from __future__ import annotations
from datetime import datetime
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, conint
from pydantic.alias_generators import to_camel

T = TypeVar("T")

DEFAULT_PAGE_LIMIT = 20
MAX_PAGE_LIMIT = 100


class WireModel(BaseModel):
    """camelCase on the wire, snake_case in Python."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------- Projections ----------
class UserPublic(WireModel):
    """User as anyone may see it: no email, no password hash."""
    id: str
    handle: str
    name: str
    created_at: datetime


class UserAccount(WireModel):
    """User as its owner sees it after register/login."""
    id: str
    handle: str
    email: str
    name: str
    created_at: datetime


class PostView(WireModel):
    id: str
    text: str
    media_url: Optional[str] = None
    created_at: datetime
    author: UserPublic


# ---------- Pagination ----------
class PageRequest(WireModel):
    offset: conint(ge=0) = 0
    limit: conint(ge=1, le=MAX_PAGE_LIMIT) = DEFAULT_PAGE_LIMIT


class Page(WireModel, Generic[T]):
    items: List[T] = Field(default_factory=list)
    offset: int
    limit: int
    total: int
