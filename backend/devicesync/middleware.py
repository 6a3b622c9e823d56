"""
Request body size limit.

A pure ASGI middleware rather than ``@app.middleware("http")`` so the body
can be counted as it streams in: chunked uploads carry no Content-Length,
and the declared length alone can't be trusted.
"""

import logging

from fastapi import HTTPException
from fastapi.responses import JSONResponse
from starlette.datastructures import Headers

logger = logging.getLogger(__name__)


def _too_large(max_body_bytes: int) -> str:
    return f"Request body too large (max {max_body_bytes} bytes)"


class BodySizeLimitMiddleware:
    """
    Answer 413 once a request body goes over ``max_body_bytes``.

    A declared Content-Length over the limit is refused before anything is
    read. Otherwise every ``http.request`` chunk is counted, and the chunk
    that crosses the limit raises a 413 ``HTTPException`` inside the body
    read, which the app's handlers turn into ``{"error": ...}``.
    """

    def __init__(self, app, max_body_bytes: int):
        self.app = app
        self.max_body_bytes = max_body_bytes

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        content_length = Headers(scope=scope).get("content-length")
        if content_length and content_length.isdigit() and int(content_length) > self.max_body_bytes:
            logger.warning(f"Refused {scope.get('path')}: declared body of {content_length} bytes")
            response = JSONResponse(status_code=413, content={"error": _too_large(self.max_body_bytes)})
            await response(scope, receive, send)
            return

        received = 0

        async def counted_receive():
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.max_body_bytes:
                    logger.warning(f"Refused {scope.get('path')}: body over {self.max_body_bytes} bytes")
                    raise HTTPException(status_code=413, detail=_too_large(self.max_body_bytes))
            return message

        await self.app(scope, counted_receive, send)
