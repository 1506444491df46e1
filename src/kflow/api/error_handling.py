from __future__ import annotations

import logging
from typing import Any, cast

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from kflow.api.middleware.request_id import get_request_id
from kflow.domain.common.errors import (
    ConflictError,
    KitchenFlowError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def _error_response(
    *,
    status_code: int,
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": message,
            "code": code,
            "details": details or {},
            "requestId": get_request_id(),
        },
    )


def _domain_exception_handler(status_code: int):
    async def handler(_: Request, exc: Exception) -> JSONResponse:
        domain_exc = cast(KitchenFlowError, exc)
        if status_code >= 500:
            logger.error("request_failed", extra={"status_code": status_code}, exc_info=exc)
        return _error_response(
            status_code=status_code,
            code=domain_exc.code,
            message=domain_exc.message,
            details=domain_exc.details,
        )

    return handler


async def _http_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    http_exc = cast(StarletteHTTPException, exc)
    message = str(http_exc.detail) if http_exc.detail else "request failed"
    code = {400: "BAD_REQUEST", 404: "NOT_FOUND", 405: "METHOD_NOT_ALLOWED", 409: "CONFLICT"}.get(
        http_exc.status_code, "HTTP_ERROR"
    )
    return _error_response(status_code=http_exc.status_code, code=code, message=message)


async def _validation_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    validation_exc = cast(RequestValidationError, exc)
    return _error_response(
        status_code=400,
        code="INVALID_REQUEST",
        message="request validation failed",
        details={"errors": _jsonable_errors(validation_exc)},
    )


async def _unhandled_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    logger.error("unhandled_exception", exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "internal server error"})


def _jsonable_errors(exc: RequestValidationError) -> list[dict[str, Any]]:
    # Pydantic error contexts may hold exception instances.
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg", ""), "type": error.get("type", "")}
        for error in exc.errors()
    ]


def register_exception_handlers(app: FastAPI) -> None:
    mappings: list[tuple[type[KitchenFlowError], int]] = [
        (ValidationError, 400),
        (NotFoundError, 404),
        (ConflictError, 409),
        (PersistenceError, 500),
    ]

    # Handlers resolve through the exception MRO, so concrete errors inherit these.
    for exc_cls, status_code in mappings:
        app.add_exception_handler(exc_cls, _domain_exception_handler(status_code))

    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(Exception, _unhandled_exception_handler)
