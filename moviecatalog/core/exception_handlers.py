from __future__ import annotations

"""
Problem+JSON exception handlers (RFC 7807).

Registered by `moviecatalog.main.create_app`. Every error leaves the API as
application/problem+json with a stable schema:

    type, title, status, detail, instance, timestamp, request_id
    (+ code / details / fieldErrors for application errors,
     + errors for request validation failures)
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from moviecatalog.core.exceptions import AppException
from moviecatalog.middleware.request_id import get_request_id

log = logging.getLogger(__name__)

PROBLEM_MEDIA_TYPE = "application/problem+json"


def _stamp(body: Dict[str, Any], request: Request) -> Dict[str, Any]:
    body.setdefault("instance", request.url.path)
    body.setdefault("timestamp", datetime.now(timezone.utc).isoformat())
    body.setdefault("request_id", get_request_id(request) or "N/A")
    return body


def _problem(title: str, detail: str, status_code: int, request: Request, headers=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=_stamp(
            {"type": "about:blank", "title": title, "detail": detail, "status": status_code},
            request,
        ),
        media_type=PROBLEM_MEDIA_TYPE,
        headers=headers,
    )


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:  # type: ignore
    body = exc.to_problem(fallback_request_id=get_request_id(request) or None)
    log.info("%s %s -> %s %s", request.method, request.url.path, exc.status_code, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content=jsonable_encoder(_stamp(body, request)),
        media_type=PROBLEM_MEDIA_TYPE,
        headers=getattr(exc, "headers", None),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:  # type: ignore
    title = exc.__class__.__name__.replace("Exception", "").strip() or "Error"
    detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return _problem(title, detail, exc.status_code, request, headers=getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:  # type: ignore
    detail = "Validation error"
    body = {
        "type": "about:blank",
        "title": detail,
        "detail": detail,
        "status": status.HTTP_422_UNPROCESSABLE_ENTITY,
        "errors": jsonable_encoder(exc.errors()),
    }
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=_stamp(body, request),
        media_type=PROBLEM_MEDIA_TYPE,
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:  # type: ignore
    # Hide internals from the client; the traceback goes to the log.
    log.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _problem(
        "Internal Server Error",
        "An unexpected error occurred.",
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        request,
    )


__all__ = [
    "app_exception_handler",
    "http_exception_handler",
    "validation_exception_handler",
    "global_exception_handler",
]
