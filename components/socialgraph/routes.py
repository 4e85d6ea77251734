from __future__ import annotations
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from components.apigateway.contracts import UWFResponse
from components.apigateway.envelope import uwf_ok
from components.authservice.contracts import TokenClaims
from components.authservice.deps import require_identity
from components.socialcore.contracts import PageRequest

from .contracts import FollowResult
from .service import SocialGraphService

router = APIRouter(prefix="/users", tags=["users"])


def get_graph_service(request: Request) -> SocialGraphService:
    return request.app.state.graph_service


@router.get("/{user_id}", response_model=UWFResponse)
def get_user(user_id: str, request: Request, svc: SocialGraphService = Depends(get_graph_service)):
    return uwf_ok(request, svc.get_public_profile(user_id))


@router.post("/{user_id}/follow", response_model=UWFResponse)
def follow_user(
    user_id: str,
    request: Request,
    me: TokenClaims = Depends(require_identity),
    svc: SocialGraphService = Depends(get_graph_service),
):
    svc.follow(me.user_id, user_id)
    return uwf_ok(request, FollowResult(message="Successfully followed user"))


@router.delete("/{user_id}/follow", response_model=UWFResponse)
def unfollow_user(
    user_id: str,
    request: Request,
    me: TokenClaims = Depends(require_identity),
    svc: SocialGraphService = Depends(get_graph_service),
):
    svc.unfollow(me.user_id, user_id)
    return uwf_ok(request, FollowResult(message="Successfully unfollowed user"))


@router.get("/{user_id}/followers", response_model=UWFResponse)
def list_followers(
    user_id: str,
    request: Request,
    page: Annotated[PageRequest, Query()],
    svc: SocialGraphService = Depends(get_graph_service),
):
    return uwf_ok(request, svc.list_followers(user_id, page.offset, page.limit))


@router.get("/{user_id}/following", response_model=UWFResponse)
def list_following(
    user_id: str,
    request: Request,
    page: Annotated[PageRequest, Query()],
    svc: SocialGraphService = Depends(get_graph_service),
):
    return uwf_ok(request, svc.list_following(user_id, page.offset, page.limit))
