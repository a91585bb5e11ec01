"""
Gzip support for request bodies.

Responses are compressed by Starlette's GZipMiddleware. This ASGI middleware
covers the other direction: a request sent with `Content-Encoding: gzip` is
decompressed before it reaches the route, so handlers always see plain bytes.
A body that is not valid gzip is answered with 400.
"""

import gzip
import zlib

from starlette.datastructures import Headers
from starlette.responses import PlainTextResponse

_STRIPPED_HEADERS = (b"content-encoding", b"content-length")


class GzipRequestMiddleware:
    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        encoding = Headers(scope=scope).get("content-encoding", "")
        if "gzip" not in encoding.lower():
            await self.app(scope, receive, send)
            return

        chunks = []
        more_body = True
        while more_body:
            message = await receive()
            chunks.append(message.get("body", b""))
            more_body = message.get("more_body", False)

        try:
            body = gzip.decompress(b"".join(chunks))
        except (OSError, EOFError, zlib.error):
            response = PlainTextResponse("Bad Request: invalid gzip body", status_code=400)
            await response(scope, receive, send)
            return

        headers = [(k, v) for k, v in scope["headers"] if k.lower() not in _STRIPPED_HEADERS]
        headers.append((b"content-length", str(len(body)).encode("latin-1")))
        scope = dict(scope, headers=headers)

        delivered = False

        async def receive_decompressed():
            nonlocal delivered
            if not delivered:
                delivered = True
                return {"type": "http.request", "body": body, "more_body": False}
            return await receive()

        await self.app(scope, receive_decompressed, send)
