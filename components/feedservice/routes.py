from __future__ import annotations
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, status

from components.apigateway.contracts import UWFResponse
from components.apigateway.envelope import uwf_ok
from components.authservice.contracts import TokenClaims
from components.authservice.deps import require_identity
from components.socialcore.contracts import PageRequest

from .contracts import CreatePostRequest
from .service import FeedService

router = APIRouter(tags=["posts"])


def get_feed_service(request: Request) -> FeedService:
    return request.app.state.feed_service


@router.post("/posts", response_model=UWFResponse, status_code=status.HTTP_201_CREATED)
def create_post(
    body: CreatePostRequest,
    request: Request,
    me: TokenClaims = Depends(require_identity),
    svc: FeedService = Depends(get_feed_service),
):
    media_url = str(body.media_url) if body.media_url else None
    return uwf_ok(request, svc.create_post(me.user_id, body.text, media_url))


@router.get("/posts/{post_id}", response_model=UWFResponse)
def get_post(post_id: str, request: Request, svc: FeedService = Depends(get_feed_service)):
    return uwf_ok(request, svc.get_post(post_id))


@router.get("/users/{user_id}/posts", response_model=UWFResponse)
def list_user_posts(
    user_id: str,
    request: Request,
    page: Annotated[PageRequest, Query()],
    svc: FeedService = Depends(get_feed_service),
):
    return uwf_ok(request, svc.list_user_posts(user_id, page.offset, page.limit))


@router.get("/feed", response_model=UWFResponse)
def get_feed(
    request: Request,
    page: Annotated[PageRequest, Query()],
    me: TokenClaims = Depends(require_identity),
    svc: FeedService = Depends(get_feed_service),
):
    return uwf_ok(request, svc.get_feed(me.user_id, page.offset, page.limit))
