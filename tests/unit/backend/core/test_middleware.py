"""
Unit Tests for Request Context Middleware.

Tests the RequestContextMiddleware functionality including:
- Request ID generation and propagation
- Source extraction from X-Frontend-ID header
- Response timing headers
- Structlog context binding
"""

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest
from starlette.requests import Request
from starlette.responses import Response

from notekeep.backend.core.middleware import (
    KNOWN_SOURCES,
    RequestContextMiddleware,
    resolve_request_id,
    resolve_source,
)


@pytest.fixture
def middleware():
    return RequestContextMiddleware(MagicMock())


@pytest.fixture
def mock_request():
    request = MagicMock(spec=Request)
    request.headers = {}
    request.method = "GET"
    request.url = MagicMock()
    request.url.path = "/api/v1/notes"
    request.client = MagicMock()
    request.client.host = "127.0.0.1"
    request.state = SimpleNamespace()
    return request


async def _ok(request):
    return Response(content="OK", status_code=200)


class TestSource:

    @pytest.mark.parametrize("header", ["web", "mobile", "CLI"])
    async def test_known_sources_are_kept(self, middleware, mock_request, header):
        mock_request.headers = {"X-Frontend-ID": header}

        await middleware.dispatch(mock_request, _ok)

        assert mock_request.state.source == header.lower()

    async def test_unknown_source_is_normalized(self, middleware, mock_request):
        mock_request.headers = {"X-Frontend-ID": "smart-fridge"}

        await middleware.dispatch(mock_request, _ok)

        assert mock_request.state.source == "unknown"

    def test_unknown_is_not_a_client_source(self):
        assert "unknown" not in KNOWN_SOURCES

    @pytest.mark.parametrize("header, expected", [(None, "unknown"), (" Mobile ", "mobile"), ("unknown", "unknown")])
    def test_resolve_source(self, header, expected):
        assert resolve_source(header) == expected


class TestRequestId:

    async def test_generates_request_id(self, middleware, mock_request):
        response = await middleware.dispatch(mock_request, _ok)

        assert len(response.headers["X-Request-ID"]) == 36
        assert mock_request.state.request_id == response.headers["X-Request-ID"]

    async def test_propagates_request_id(self, middleware, mock_request):
        mock_request.headers = {"X-Request-ID": "abc-123"}

        response = await middleware.dispatch(mock_request, _ok)

        assert response.headers["X-Request-ID"] == "abc-123"

    @pytest.mark.parametrize("header", ["", "has space", "line\nbreak", "x" * 129])
    def test_malformed_request_id_is_replaced(self, header):
        replaced = resolve_request_id(header)
        assert replaced != header
        assert len(replaced) == 36


class TestTimingAndContext:

    async def test_sets_response_time(self, middleware, mock_request):
        response = await middleware.dispatch(mock_request, _ok)
        assert response.headers["X-Response-Time"].endswith("ms")

    async def test_binds_and_clears_structlog_context(self, middleware, mock_request):
        mock_request.headers = {"X-Request-ID": "ctx-1", "X-Frontend-ID": "api"}

        with patch("notekeep.backend.core.middleware.structlog.contextvars") as ctx:
            await middleware.dispatch(mock_request, _ok)

        ctx.bind_contextvars.assert_called_once_with(
            request_id="ctx-1",
            source="api",
            method="GET",
            path="/api/v1/notes",
        )
        assert ctx.clear_contextvars.call_count == 2

    async def test_exception_propagates_and_context_is_cleared(self, middleware, mock_request):
        async def boom(request):
            raise RuntimeError("handler failed")

        with patch("notekeep.backend.core.middleware.structlog.contextvars") as ctx:
            with pytest.raises(RuntimeError):
                await middleware.dispatch(mock_request, boom)

        assert ctx.clear_contextvars.call_count == 2
