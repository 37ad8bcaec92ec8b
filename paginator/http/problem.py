"""JSON error envelope and global exception handlers.

Every failure leaves the API as ``{"error": <message>, **diagnostics}`` with
``application/json``; no exception escapes to terminate the process.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from paginator.logic.errors import OrderError, status_for

logger = logging.getLogger(__name__)


def error_body(message: str, **fields) -> dict:  # type: ignore[no-untyped-def]
    body = {"error": message}
    body.update(fields)
    return body


async def handle_order_error(request: Request, exc: OrderError) -> JSONResponse:  # noqa: D401
    status = status_for(exc)
    log = logger.error if status >= 500 else logger.info
    log(
        "order_error kind=%s status=%s path=%s message=%s fields=%s",
        exc.kind,
        status,
        request.url.path,
        exc.message,
        exc.fields,
    )
    return JSONResponse(error_body(exc.message, **exc.fields), status_code=status)


async def handle_http_exception(request: Request, exc: HTTPException) -> JSONResponse:  # noqa: D401
    status = int(getattr(exc, "status_code", 500) or 500)
    detail = getattr(exc, "detail", None)
    if isinstance(detail, dict):
        body = detail if "error" in detail else error_body("Error", **detail)
    else:
        body = error_body(str(detail or "Error"))
    headers = getattr(exc, "headers", None)
    return JSONResponse(body, status_code=status, headers=dict(headers) if headers else None)


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:  # noqa: D401
    errors = []
    for err in exc.errors():
        errors.append({"loc": list(err.get("loc", [])), "msg": str(err.get("msg", "")), "type": err.get("type")})
    logger.info("request_validation_failed path=%s errors=%s", request.url.path, len(errors))
    return JSONResponse(error_body("Invalid request body", details=errors), status_code=400)


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:  # noqa: D401
    logger.error("unexpected_error path=%s", request.url.path, exc_info=exc)
    return JSONResponse(error_body("Internal server error"), status_code=500)


__all__ = [
    "error_body",
    "handle_order_error",
    "handle_http_exception",
    "handle_request_validation_error",
    "handle_unexpected_error",
]
