"""
Tests for the guard pipeline body stage.

Requests are built from raw ASGI scopes so the test controls exactly
what the body stream yields.
"""

import pytest
from starlette.requests import Request

from app.domain.errors import ValidationFailure
from app.interfaces.hiring.schemas import ApplyRequest
from app.interfaces.pipeline import GuardPipeline

apply_body_guard = GuardPipeline().body(ApplyRequest)


def make_request(app, headers: dict[str, str], receive) -> Request:
    scope = {
        "type": "http",
        "method": "POST",
        "path": "/api/v1/jobs/j1/applications",
        "query_string": b"",
        "headers": [(k.lower().encode(), v.encode()) for k, v in headers.items()],
        "client": ("203.0.113.7", 50000),
        "app": app,
    }
    return Request(scope, receive)


class ChunkedBody:
    """ASGI receive channel delivering the body in ``parts``."""

    def __init__(self, *parts: bytes) -> None:
        self.pending = [
            {"type": "http.request", "body": part, "more_body": i < len(parts) - 1}
            for i, part in enumerate(parts)
        ]

    async def __call__(self):
        return self.pending.pop(0)


async def never_read():
    raise AssertionError("body must not be read")


class TestBodyStage:
    """The body stage rejects oversized payloads before buffering them."""

    @pytest.mark.asyncio
    async def test_declared_length_rejected_without_reading(self, make_api) -> None:
        api = make_api(max_request_size_bytes=64)
        request = make_request(
            api.app,
            {"Content-Type": "application/json", "Content-Length": "1000000"},
            never_read,
        )
        with pytest.raises(ValidationFailure) as exc_info:
            await apply_body_guard(request)
        assert exc_info.value.message == "Payload too large. Maximum size is 64 bytes"

    @pytest.mark.asyncio
    async def test_wrong_content_type_rejected_without_reading(self, make_api) -> None:
        api = make_api()
        request = make_request(api.app, {"Content-Type": "text/plain"}, never_read)
        with pytest.raises(ValidationFailure):
            await apply_body_guard(request)

    @pytest.mark.asyncio
    async def test_undeclared_stream_stops_at_limit(self, make_api) -> None:
        """Without Content-Length, reading stops at the first chunk past the cap."""
        api = make_api(max_request_size_bytes=64)
        body = ChunkedBody(b'{"coverNote": "', b"x" * 100, b'"}')
        request = make_request(api.app, {"Content-Type": "application/json"}, body)
        with pytest.raises(ValidationFailure) as exc_info:
            await apply_body_guard(request)
        assert exc_info.value.message == "Payload too large. Maximum size is 64 bytes"
        assert len(body.pending) == 1

    @pytest.mark.asyncio
    async def test_small_body_parsed(self, make_api) -> None:
        api = make_api()
        request = make_request(
            api.app,
            {"Content-Type": "application/json"},
            ChunkedBody(b'{"coverNote": ', b'"Hello"}'),
        )
        context = await apply_body_guard(request)
        assert context.body.cover_note == "Hello"
