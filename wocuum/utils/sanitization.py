"""
Input sanitization for request data.

A blunt denylist: SQL keywords, SQL comments, script tags and a few
JavaScript injection fragments are stripped from every string, then
whitespace is normalized. It can remove legitimate words ("insert" in a
sentence) and miss obfuscated payloads, so it only backs up the
parameterized queries SQLAlchemy already issues.
"""

import json
import logging
import re
from typing import Any
from urllib.parse import parse_qsl, urlencode

from fastapi import Request
from starlette.datastructures import MutableHeaders

logger = logging.getLogger(__name__)

_PATTERNS = [
    re.compile(
        r"\b(union|select|insert|update|delete|drop|create|alter|exec|execute|script|javascript|on\w+\s*=)\b",
        re.IGNORECASE,
    ),
    # SQL comments
    re.compile(r"--.*$", re.MULTILINE),
    re.compile(r"/\*[\s\S]*?\*/"),
    # XSS
    re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE),
    re.compile(r"javascript:", re.IGNORECASE),
    re.compile(r"on\w+\s*=", re.IGNORECASE),
    re.compile(r"alert\s*\(", re.IGNORECASE),
    re.compile(r"eval\s*\(", re.IGNORECASE),
    re.compile(r"document\.", re.IGNORECASE),
    re.compile(r"window\.", re.IGNORECASE),
]
_WHITESPACE = re.compile(r"\s+")


def sanitize_string(value: Any) -> Any:
    """Strip injection-looking fragments from a string. Other values pass through."""
    if not isinstance(value, str):
        return value

    for pattern in _PATTERNS:
        value = pattern.sub("", value)
    return _WHITESPACE.sub(" ", value.strip())


def sanitize_object(value: Any) -> Any:
    """Sanitize every string inside nested lists and dicts, keeping the structure."""
    if isinstance(value, str):
        return sanitize_string(value)
    if isinstance(value, list):
        return [sanitize_object(item) for item in value]
    if isinstance(value, dict):
        return {key: sanitize_object(item) for key, item in value.items()}
    return value


def sanitize_query_string(query_string: bytes) -> bytes:
    # surrogateescape lets bytes that are not valid UTF-8 survive the round trip
    pairs = parse_qsl(
        query_string.decode("utf-8", errors="surrogateescape"),
        keep_blank_values=True,
        errors="surrogateescape",
    )
    sanitized = [(key, sanitize_string(value)) for key, value in pairs]
    return urlencode(sanitized, errors="surrogateescape").encode("ascii")


class SanitizationMiddleware:
    """ASGI middleware that sanitizes the query string and JSON request bodies."""

    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        scope = dict(scope)
        if scope.get("query_string"):
            scope["query_string"] = sanitize_query_string(scope["query_string"])

        headers = MutableHeaders(scope=scope)
        if "application/json" not in headers.get("content-type", ""):
            await self.app(scope, receive, send)
            return

        body = b""
        more_body = True
        while more_body:
            message = await receive()
            if message["type"] != "http.request":
                # client went away before the body arrived
                await self.app(scope, receive, send)
                return
            body += message.get("body", b"")
            more_body = message.get("more_body", False)

        if body:
            try:
                data = json.loads(body)
            except ValueError:
                logger.debug("Leaving malformed JSON body for the router to reject")
            else:
                body = json.dumps(sanitize_object(data)).encode("utf-8")
                headers["content-length"] = str(len(body))

        body_sent = False

        async def receive_sanitized():
            nonlocal body_sent
            if body_sent:
                return await receive()
            body_sent = True
            return {"type": "http.request", "body": body, "more_body": False}

        await self.app(scope, receive_sanitized, send)


def sanitize_path_params(request: Request):
    """Router dependency; runs before path parameters are bound to the endpoint."""
    params = request.scope.get("path_params")
    if params:
        for key, value in list(params.items()):
            params[key] = sanitize_string(value)
