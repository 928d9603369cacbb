"""Integration tests for request ID propagation through the middleware."""

import pytest
from httpx import AsyncClient


class TestRequestContext:

    @pytest.mark.asyncio
    async def test_generates_request_id(self, client: AsyncClient):
        response = await client.get("/health")

        assert response.headers["x-request-id"]
        assert response.headers["x-response-time"].endswith("ms")

    @pytest.mark.asyncio
    async def test_echoes_client_request_id(self, client: AsyncClient, auth_headers: dict, api):
        response = await client.get(
            "/api/v1/notes",
            headers={**auth_headers, "X-Request-ID": "req-123"},
        )

        data = api.assert_success(response)
        assert response.headers["x-request-id"] == "req-123"
        assert data["metadata"]["request_id"] == "req-123"

    @pytest.mark.asyncio
    async def test_error_responses_carry_request_id(self, client: AsyncClient, api):
        response = await client.get("/api/v1/notes", headers={"X-Request-ID": "req-err"})

        data = api.assert_error(response, 401)
        assert data["metadata"]["request_id"] == "req-err"
        assert response.headers["x-request-id"] == "req-err"
