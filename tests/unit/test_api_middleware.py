"""Unit tests for tenantry.api.middleware.HttpClientLifespan."""

from __future__ import annotations

import httpx
import pytest

from tenantry.api.middleware import HttpClientLifespan


class TestHttpClientLifespan:
    """Tests for the shutdown hook."""

    @pytest.mark.asyncio
    async def test_shutdown_closes_client(self) -> None:
        """The shared client is closed when the server stops."""
        http = httpx.AsyncClient()

        await HttpClientLifespan(http).process_shutdown({}, {})

        assert http.is_closed is True

    @pytest.mark.asyncio
    async def test_shutdown_is_idempotent(self) -> None:
        """A second shutdown on a closed client is a no-op."""
        http = httpx.AsyncClient()
        lifespan = HttpClientLifespan(http)

        await lifespan.process_shutdown({}, {})
        await lifespan.process_shutdown({}, {})

        assert http.is_closed is True
