from __future__ import annotations
from fastapi import APIRouter, Depends, Request, status

from components.apigateway.contracts import UWFResponse
from components.apigateway.envelope import uwf_ok

from .contracts import LoginRequest, RegisterRequest
from .deps import get_auth_service
from .service import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=UWFResponse, status_code=status.HTTP_201_CREATED)
def register(req: RegisterRequest, request: Request, svc: AuthService = Depends(get_auth_service)):
    result = svc.register(email=req.email, handle=req.handle, name=req.name, password=req.password)
    return uwf_ok(request, result)


@router.post("/login", response_model=UWFResponse)
def login(req: LoginRequest, request: Request, svc: AuthService = Depends(get_auth_service)):
    result = svc.login(email_or_handle=req.email_or_handle, password=req.password)
    return uwf_ok(request, result)
