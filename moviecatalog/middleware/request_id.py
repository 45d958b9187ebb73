# moviecatalog/middleware/request_id.py
from __future__ import annotations

"""
# MovieCatalog · Request ID Middleware (pure ASGI)

- Reuses a client-supplied `X-Request-ID` / `X-Correlation-ID` when it is a
  valid UUIDv4 and trusting client ids is enabled.
- Generates a UUIDv4 otherwise.
- Injects it into `request.state.request_id` and the response header.
- Adds `request_id` to the **loguru** context for the whole request.

## Env / Config
- `REQUEST_ID_HEADER_NAME` (default: `X-Request-ID`)
- `REQUEST_ID_TRUST_CLIENT_IDS` ("true"/"false"; default: "true")
"""

import os
import uuid

from loguru import logger
from starlette.datastructures import Headers
from starlette.types import ASGIApp, Receive, Scope, Send

HEADER_NAME = os.getenv("REQUEST_ID_HEADER_NAME", "X-Request-ID")
TRUST_CLIENT_IDS = os.getenv("REQUEST_ID_TRUST_CLIENT_IDS", "true").lower() == "true"
MAX_ID_LENGTH = 64


class RequestIDMiddleware:
    """Lightweight ASGI middleware managing a per-request correlation id."""

    def __init__(self, app: ASGIApp, header_name: str = HEADER_NAME) -> None:
        self.app = app
        self.header_name = header_name

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope.get("type") != "http":
            return await self.app(scope, receive, send)

        req_id = self._choose_request_id(Headers(scope=scope))
        scope.setdefault("state", {})["request_id"] = req_id

        async def _send_wrapper(message):
            if message.get("type") == "http.response.start":
                name_bytes = self.header_name.encode("latin-1")
                headers = [(k, v) for (k, v) in message.get("headers", []) if k.lower() != name_bytes.lower()]
                headers.append((name_bytes, req_id.encode("latin-1")))
                message["headers"] = headers
            await send(message)

        with logger.contextualize(request_id=req_id):
            await self.app(scope, receive, _send_wrapper)

    def _choose_request_id(self, headers: Headers) -> str:
        """Return a safe request id from headers or generate a UUIDv4."""
        if TRUST_CLIENT_IDS:
            incoming = (headers.get(self.header_name) or headers.get("X-Correlation-ID") or "").strip()
            if 0 < len(incoming) <= MAX_ID_LENGTH:
                try:
                    val = uuid.UUID(incoming)
                except ValueError:
                    val = None
                if val is not None and val.version == 4:
                    return str(val)
        return str(uuid.uuid4())


def get_request_id(request) -> str:
    """Fetch the current request id from `request.state` ("" if absent)."""
    return getattr(getattr(request, "state", object()), "request_id", "") or ""


__all__ = ["RequestIDMiddleware", "get_request_id"]
