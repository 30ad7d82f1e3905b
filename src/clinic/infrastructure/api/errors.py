"""Maps exceptions to JSON error responses."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from clinic.domain.exceptions import (
    ConflictError,
    DomainException,
    EntityNotFoundError,
    VoucherRejectedError,
    VoucherRejection,
)

logger = logging.getLogger(__name__)


def status_for(exc: DomainException) -> int:
    if isinstance(exc, VoucherRejectedError):
        return 404 if exc.reason is VoucherRejection.NOT_FOUND else 400
    if isinstance(exc, EntityNotFoundError):
        return 404
    if isinstance(exc, ConflictError):
        return 409
    return 400


async def domain_error(request: Request, exc: DomainException) -> JSONResponse:
    body = {"error": exc.kind, "message": str(exc)}
    if isinstance(exc, VoucherRejectedError):
        body["reason"] = exc.reason.value
    return JSONResponse(status_code=status_for(exc), content=body)


async def request_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = "; ".join(
        f"{'.'.join(str(p) for p in err['loc'][1:]) or 'body'}: {err['msg']}"
        for err in exc.errors()
    )
    return JSONResponse(status_code=400, content={"error": "validation_error", "message": problems})


async def unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"error": "internal_error", "message": "Internal server error"},
    )


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainException, domain_error)
    app.add_exception_handler(RequestValidationError, request_error)
    app.add_exception_handler(Exception, unexpected_error)
