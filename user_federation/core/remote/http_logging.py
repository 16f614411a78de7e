"""Request/response tracing for remote directory calls.

Enabled only when debug logging is configured. Lines are emitted at INFO
on the ``user_federation.http`` logger with an ``[HTTP]`` prefix; the
traced data is never altered.
"""
from __future__ import annotations
import logging
from typing import Optional

import requests
from requests.models import PreparedRequest

logger = logging.getLogger("user_federation.http")


def _decode_body(content: bytes, encoding: Optional[str]) -> str:
    # Server-declared charsets may be unknown to Python; fall back to utf-8.
    try:
        return content.decode(encoding or "utf-8", errors="replace")
    except LookupError:
        return content.decode("utf-8", errors="replace")


class HttpTraceLogger:
    """Full request/response tracer (headers and bodies)."""

    def __init__(self, log: Optional[logging.Logger] = None):
        self.log = log or logger

    def _emit(self, message: str) -> None:
        self.log.info("[HTTP] %s", message)

    def log_request(self, request: PreparedRequest, include_body: bool = True) -> None:
        self._emit(f"--> {request.method} {request.url}")
        for name, value in request.headers.items():
            self._emit(f"{name}: {value}")

        if not include_body:
            self._emit(f"--> END {request.method} (body omitted)")
            return

        body = request.body
        if body:
            if isinstance(body, bytes):
                body = body.decode("utf-8", errors="replace")
            self._emit("")
            self._emit(body)
            self._emit(f"--> END {request.method} ({len(request.body)}-byte body)")
        else:
            self._emit(f"--> END {request.method}")

    def log_response(self, response: requests.Response) -> None:
        elapsed_ms = int(response.elapsed.total_seconds() * 1000)
        status = f"{response.status_code} {response.reason}" if response.reason else str(response.status_code)
        self._emit(f"<-- {status} {response.url} ({elapsed_ms}ms)")
        for name, value in response.headers.items():
            self._emit(f"{name}: {value}")

        content = response.content or b""
        if content:
            self._emit("")
            self._emit(_decode_body(content, response.encoding))
            self._emit(f"<-- END HTTP ({len(content)}-byte body)")
        else:
            self._emit("<-- END HTTP")

    def log_failure(self, error: Exception) -> None:
        self._emit(f"<-- HTTP FAILED: {error}")
