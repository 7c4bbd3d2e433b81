"""
JSON envelope helpers and the exception handlers that produce error envelopes.

Envelope shape: `success` always; `message`, `data`, `count`, `errors` and
`timestamp` only when present.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import errors

logger = logging.getLogger(__name__)


def envelope(
    *,
    success: bool,
    message: str | None = None,
    data: Any = None,
    count: int | None = None,
    errors: list[str] | None = None,
    **extra: Any,
) -> dict[str, Any]:
    body: dict[str, Any] = {"success": success}
    if message is not None:
        body["message"] = message
    if count is not None:
        body["count"] = count
    if data is not None:
        body["data"] = data
    if errors:
        body["errors"] = list(errors)
    body.update({k: v for k, v in extra.items() if v is not None})
    return jsonable_encoder(body)


def error_response(message: str, status_code: int, *, problems: list[str] | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=envelope(success=False, message=message, errors=problems),
    )


async def _registration_error_handler(_: Request, exc: errors.RegistrationError) -> JSONResponse:
    return error_response(exc.message, exc.status_code, problems=exc.errors)


async def _http_error_handler(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 405:
        message = errors.MethodNotAllowed.default_message
    elif exc.status_code == 404:
        message = "Not found"
    else:
        message = str(exc.detail)
    response = error_response(message, exc.status_code)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def _unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error method=%s path=%s", request.method, request.url.path, exc_info=exc)
    return error_response(errors.RegistrationError.default_message, 500)


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(errors.RegistrationError, _registration_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_error_handler)
    app.add_exception_handler(Exception, _unexpected_error_handler)
