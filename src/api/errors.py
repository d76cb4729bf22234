"""
Exception handlers: map workflow errors to HTTP statuses and the
uniform failure envelope. Internals never leak past this layer.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.api.schemas.responses import fail
from src.core.errors import (
    InternalError,
    InvalidArgument,
    NotFound,
    PermissionDenied,
    RateLimited,
    Unauthenticated,
    VerificationError,
)

logger = logging.getLogger(__name__)

STATUS_CODES: dict[type[VerificationError], int] = {
    Unauthenticated: 401,
    PermissionDenied: 403,
    InvalidArgument: 400,
    NotFound: 404,
    RateLimited: 429,
    InternalError: 500,
}


def status_for(error: VerificationError) -> int:
    for cls in type(error).__mro__:
        if cls in STATUS_CODES:
            return STATUS_CODES[cls]
    return 500


async def verification_error_handler(request: Request, exc: VerificationError) -> JSONResponse:
    status_code = status_for(exc)
    data = None
    if isinstance(exc, InvalidArgument) and exc.fields:
        data = {"fields": exc.fields}
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return JSONResponse(status_code=status_code, content=fail(InternalError.default_message))
    headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
    return JSONResponse(status_code=status_code, content=fail(exc.message, data), headers=headers)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    fields = {}
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ()) if p != "body"]
        fields[".".join(loc) or "body"] = err.get("msg", "invalid")
    return JSONResponse(status_code=400, content=fail(InvalidArgument.default_message, {"fields": fields}))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content=fail(InternalError.default_message))


def register_exception_handlers(app: FastAPI):
    app.add_exception_handler(VerificationError, verification_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
