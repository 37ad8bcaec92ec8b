"""Request ID and request logging middleware.

Assigns a stable X-Request-Id header to each response when absent and logs
one line per HTTP request with method, path and status.
"""

from __future__ import annotations

import logging
import time
import uuid

logger = logging.getLogger(__name__)


class RequestLogMiddleware:
    def __init__(self, app, header_name: str = "X-Request-Id") -> None:  # type: ignore[no-untyped-def]
        self.app = app
        self.header_name = header_name

    async def __call__(self, scope, receive, send):  # type: ignore[no-untyped-def]
        if scope.get("type") != "http":
            await self.app(scope, receive, send)
            return

        method = str(scope.get("method", ""))
        path = str(scope.get("path", ""))
        query = scope.get("query_string") or b""
        if query:
            path = f"{path}?{query.decode('latin-1')}"
        generated = str(uuid.uuid4())
        started = time.perf_counter()
        logger.info("request_start id=%s %s %s", generated, method, path)

        async def send_wrapper(message):  # type: ignore[no-untyped-def]
            if message.get("type") == "http.response.start":
                headers = list(message.get("headers") or [])
                header_bytes = self.header_name.encode("latin-1")
                lower = [k.lower() if isinstance(k, (bytes, bytearray)) else str(k).lower() for k, _ in headers]
                if header_bytes.lower() not in lower:
                    headers.append((header_bytes, generated.encode("latin-1")))
                message = {**message, "headers": headers}
                logger.info(
                    "request_done id=%s %s %s status=%s elapsed_ms=%.1f",
                    generated,
                    method,
                    path,
                    message.get("status"),
                    (time.perf_counter() - started) * 1000,
                )
            await send(message)

        await self.app(scope, receive, send_wrapper)


__all__ = ["RequestLogMiddleware"]
