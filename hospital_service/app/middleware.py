"""Request ID middleware for per-request log correlation.

This middleware:
1. Takes the request ID from the X-Request-ID header if present
2. Generates a new UUID if the header is missing
3. Stores the ID in request.state.request_id
4. Adds the ID to the logging context
5. Echoes X-Request-ID in the response headers
6. Clears the logging context after the request completes
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from hospital_service.infra.logging import clear_log_context, set_log_context

if TYPE_CHECKING:
    from starlette.types import ASGIApp, Message, Receive, Scope, Send

HEADER_NAME = b"x-request-id"
MAX_REQUEST_ID_LENGTH = 128


class RequestIDMiddleware:
    """Pure ASGI middleware attaching a request ID to every HTTP request.

    Usage:
        app = FastAPI()
        app.add_middleware(RequestIDMiddleware)
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = self._request_id_from(scope) or str(uuid.uuid4())
        scope.setdefault("state", {})["request_id"] = request_id
        set_log_context(request_id=request_id)

        async def send_with_header(message: Message) -> None:
            if message["type"] == "http.response.start":
                headers = list(message.get("headers", []))
                headers.append((HEADER_NAME, request_id.encode("latin-1")))
                message["headers"] = headers
            await send(message)

        try:
            await self.app(scope, receive, send_with_header)
        finally:
            clear_log_context()

    @staticmethod
    def _request_id_from(scope: Scope) -> str | None:
        for name, value in scope.get("headers", []):
            if name == HEADER_NAME:
                text = value.decode("latin-1").strip()
                if text and len(text) <= MAX_REQUEST_ID_LENGTH and text.isprintable():
                    return text
        return None


__all__ = ["RequestIDMiddleware"]
