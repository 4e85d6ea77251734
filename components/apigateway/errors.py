from __future__ import annotations
import logging
from http import HTTPStatus
from typing import Dict, Optional, Tuple

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from components.socialcore.errors import ErrorKind, InternalError, SocialError, ValidationFailed

from .contracts import ErrorPayload, ErrorType
from .envelope import uwf_err

logger = logging.getLogger("social.apigateway")

# One row per kind; the core never picks a status itself.
KIND_MAPPING: Dict[ErrorKind, Tuple[int, ErrorType]] = {
    ErrorKind.VALIDATION_FAILED: (422, "VALIDATION"),
    ErrorKind.USER_EXISTS: (409, "CONFLICT"),
    ErrorKind.USER_NOT_FOUND: (404, "NOT_FOUND"),
    ErrorKind.POST_NOT_FOUND: (404, "NOT_FOUND"),
    ErrorKind.INVALID_CREDENTIALS: (401, "AUTH_ERROR"),
    ErrorKind.INVALID_TOKEN: (401, "AUTH_ERROR"),
    ErrorKind.TOKEN_EXPIRED: (401, "AUTH_ERROR"),
    ErrorKind.INVALID_OPERATION: (400, "VALIDATION"),
    ErrorKind.ALREADY_FOLLOWING: (409, "CONFLICT"),
    ErrorKind.NOT_FOLLOWING: (404, "NOT_FOUND"),
    ErrorKind.STORAGE_CONFLICT: (409, "CONFLICT"),
    ErrorKind.STORAGE_UNAVAILABLE: (503, "UPSTREAM"),
    ErrorKind.INTERNAL: (500, "INTERNAL"),
}


def status_for(kind: ErrorKind) -> int:
    return KIND_MAPPING[kind][0]


def _respond(request: Request, err: SocialError) -> JSONResponse:
    status_code, err_type = KIND_MAPPING[err.kind]
    payload = ErrorPayload(type=err_type, **err.to_payload())
    return _json(request, status_code, payload)


def _json(request: Request, status_code: int, payload: ErrorPayload, headers: Optional[Dict[str, str]] = None) -> JSONResponse:
    body = uwf_err(request, payload)
    headers = dict(headers or {})
    if status_code == 401:
        headers["WWW-Authenticate"] = "Bearer"
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json", by_alias=True), headers=headers)


async def handle_social_error(request: Request, exc: SocialError) -> JSONResponse:
    if status_for(exc.kind) >= 500:
        logger.error("request.failed code=%s path=%s msg=%s", exc.kind.value, request.url.path, exc.message)
    else:
        logger.warning("request.rejected code=%s path=%s msg=%s", exc.kind.value, request.url.path, exc.message)
    return _respond(request, exc)


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {"loc": [str(p) for p in e.get("loc", ())], "msg": e.get("msg", "")}
        for e in exc.errors()
    ]
    logger.warning("request.invalid path=%s errors=%d", request.url.path, len(errors))
    return _respond(request, ValidationFailed(details={"errors": errors}))


def _http_error_type(status_code: int) -> ErrorType:
    if status_code in (401, 403):
        return "AUTH_ERROR"
    if status_code == 404:
        return "NOT_FOUND"
    if status_code == 409:
        return "CONFLICT"
    if status_code >= 500:
        return "INTERNAL"
    return "VALIDATION"


async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    status_code = exc.status_code
    if status_code == 404 and exc.detail == HTTPStatus.NOT_FOUND.phrase:
        message = f"Route {request.method} {request.url.path} not found"
    else:
        message = str(exc.detail or HTTPStatus(status_code).phrase)
    payload = ErrorPayload(
        type=_http_error_type(status_code),
        code=HTTPStatus(status_code).name,
        message=message,
        details={},
    )
    logger.warning("request.http_error status=%d method=%s path=%s", status_code, request.method, request.url.path)
    return _json(request, status_code, payload, headers=getattr(exc, "headers", None))


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("request.crashed path=%s", request.url.path)
    return _respond(request, InternalError())


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(SocialError, handle_social_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
