"""Request details handed to controller, output and exception services."""

from __future__ import annotations

import base64
import binascii
import hmac
import json
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import parse_qsl

from starlette.background import BackgroundTasks
from starlette.requests import Request
from starlette.responses import RedirectResponse

JSON_CONTENT_TYPE = "application/json"


@dataclass(slots=True)
class HttpRequestInfo:
    """Snapshot of an incoming HTTP request."""

    method: str
    uri: str
    host: str
    port: int | None
    referer: str
    raw_input: bytes
    content_type: str
    user: str | None = None
    password: str | None = None
    hmac_key: str = ""
    tails: BackgroundTasks = field(default_factory=BackgroundTasks)

    @classmethod
    def from_request(
        cls, request: Request, raw_input: bytes, *, hmac_key: str = ""
    ) -> HttpRequestInfo:
        header = request.headers.get("content-type", "")
        media_type = header.split(";", 1)[0].strip().lower()
        user, password = _basic_auth(request.headers.get("authorization"))
        uri = request.url.path
        if request.url.query:
            uri = f"{uri}?{request.url.query}"
        return cls(
            method=request.method.upper(),
            uri=uri,
            host=request.url.hostname or "",
            port=request.url.port,
            referer=request.headers.get("referer", ""),
            raw_input=raw_input,
            content_type="json" if media_type == JSON_CONTENT_TYPE else "form",
            user=user,
            password=password,
            hmac_key=hmac_key,
        )

    def parse_input(self, query: dict[str, str]) -> dict[str, Any]:
        """Decode the request body, falling back to query parameters."""
        if self.content_type == "json":
            if not self.raw_input:
                return dict(query)
            decoded = json.loads(self.raw_input)
            if isinstance(decoded, dict):
                return decoded
            return {"body": decoded}

        if self.method == "GET":
            return dict(query)
        if self.method in {"POST", "PUT", "DELETE", "PATCH"}:
            body = dict(parse_qsl(self.raw_input.decode("utf-8"), keep_blank_values=True))
            return {**query, **body}
        return {}

    def redirect(self, url: str) -> RedirectResponse:
        """Return a 303 See Other response pointing at ``url``."""
        return RedirectResponse(url, status_code=303)

    def add_tail(self, task: Callable[..., Any], *args: Any, **kwargs: Any) -> None:
        """Run ``task`` after the response has been sent."""
        self.tails.add_task(task, *args, **kwargs)

    def hmac(self, algorithm: str = "sha256", key: str | None = None) -> str:
        """Return an HMAC over ``METHOD URI BODY`` identifying this request.

        ``key`` defaults to the dispatcher's configured ``hmac_key``.
        """
        if key is None:
            key = self.hmac_key
        message = f"{self.method} {self.uri} ".encode() + self.raw_input
        return hmac.new(key.encode(), message, algorithm).hexdigest()


def _basic_auth(header: str | None) -> tuple[str | None, str | None]:
    if not header or not header.lower().startswith("basic "):
        return None, None
    try:
        decoded = base64.b64decode(header[6:].strip()).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return None, None
    user, separator, password = decoded.partition(":")
    if not separator:
        return None, None
    return user, password


__all__ = ["HttpRequestInfo"]
