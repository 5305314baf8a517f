"""Unit tests for the vendor credential cache."""

from __future__ import annotations

import datetime as dt
import json

import httpx
import pytest

from tenantry.identity import (
    CredentialCache,
    IdentityAPIError,
    IdentityConfigError,
    IdentityPlatformConfig,
    VendorSession,
)
from tests.helpers.identity_platform import VENDOR_TOKEN, FakeIdentityPlatform

_START = dt.datetime(2026, 1, 1, tzinfo=dt.UTC)


class _Clock:
    """Manually advanced UTC clock."""

    def __init__(self) -> None:
        self.now = _START

    def __call__(self) -> dt.datetime:
        return self.now


@pytest.fixture
def clock() -> _Clock:
    """Return a clock frozen at the start instant."""
    return _Clock()


@pytest.fixture
def cache(http_client: httpx.AsyncClient, clock: _Clock) -> CredentialCache:
    """Return a cache with a one-hour TTL and a controllable clock."""
    return CredentialCache(http_client, ttl=dt.timedelta(hours=1), clock=clock)


class TestVendorSession:
    """Tests for VendorSession."""

    def test_valid_for_same_client_before_expiry(self) -> None:
        """Sessions are reused only by the client that fetched them."""
        session = VendorSession(
            token="t", expires_at=_START + dt.timedelta(minutes=1), client_id="a"
        )
        assert session.is_valid_for("a", _START) is True
        assert session.is_valid_for("b", _START) is False
        assert session.is_valid_for("a", _START + dt.timedelta(minutes=1)) is False

    def test_token_not_in_repr(self) -> None:
        """Bearer tokens never appear in reprs."""
        session = VendorSession(token="secret-token", expires_at=_START, client_id="a")
        assert "secret-token" not in repr(session)


class TestCredentialCache:
    """Tests for CredentialCache.acquire."""

    @pytest.mark.asyncio
    async def test_first_call_exchanges_credentials(
        self,
        cache: CredentialCache,
        fake_platform: FakeIdentityPlatform,
        platform_config: IdentityPlatformConfig,
    ) -> None:
        """The exchange posts the vendor client id and secret."""
        token = await cache.acquire(platform_config)

        assert token == VENDOR_TOKEN
        (request,) = fake_platform.requests
        assert request.url.path == "/auth/vendor"
        assert json.loads(request.content) == {
            "clientId": "vendor-client",
            "secret": "vendor-secret",
        }
        assert cache.session is not None
        assert cache.session.expires_at == _START + dt.timedelta(hours=1)

    @pytest.mark.asyncio
    async def test_cached_token_is_reused(
        self,
        cache: CredentialCache,
        fake_platform: FakeIdentityPlatform,
        platform_config: IdentityPlatformConfig,
        clock: _Clock,
    ) -> None:
        """Calls within the TTL do not hit the platform."""
        await cache.acquire(platform_config)
        clock.now += dt.timedelta(minutes=59)
        await cache.acquire(platform_config)

        assert len(fake_platform.requests) == 1

    @pytest.mark.asyncio
    async def test_expired_token_is_refreshed(
        self,
        cache: CredentialCache,
        fake_platform: FakeIdentityPlatform,
        platform_config: IdentityPlatformConfig,
        clock: _Clock,
    ) -> None:
        """A lapsed session triggers a fresh exchange."""
        await cache.acquire(platform_config)
        clock.now += dt.timedelta(hours=1)
        await cache.acquire(platform_config)

        assert len(fake_platform.requests) == 2

    @pytest.mark.asyncio
    async def test_client_id_change_forces_refresh(
        self,
        cache: CredentialCache,
        fake_platform: FakeIdentityPlatform,
        platform_config: IdentityPlatformConfig,
    ) -> None:
        """Rotated credentials are picked up on the next call."""
        await cache.acquire(platform_config)
        rotated = IdentityPlatformConfig(
            base_url=platform_config.base_url,
            client_id="rotated-client",
            api_key="rotated-secret",
        )
        await cache.acquire(rotated)

        assert len(fake_platform.requests) == 2
        assert cache.session is not None
        assert cache.session.client_id == "rotated-client"

    @pytest.mark.asyncio
    async def test_clear_drops_session(
        self, cache: CredentialCache, platform_config: IdentityPlatformConfig
    ) -> None:
        """clear() empties the slot."""
        await cache.acquire(platform_config)
        cache.clear()
        assert cache.session is None

    @pytest.mark.asyncio
    async def test_missing_credentials(
        self, cache: CredentialCache, fake_platform: FakeIdentityPlatform
    ) -> None:
        """No exchange is attempted without credentials."""
        with pytest.raises(IdentityConfigError, match="TENANTRY_CLIENT_ID"):
            await cache.acquire(IdentityPlatformConfig())
        assert fake_platform.requests == []

    @pytest.mark.asyncio
    async def test_rejected_exchange(
        self,
        cache: CredentialCache,
        fake_platform: FakeIdentityPlatform,
        platform_config: IdentityPlatformConfig,
    ) -> None:
        """A non-2xx exchange is a configuration error."""
        fake_platform.reject_vendor_auth = True
        with pytest.raises(IdentityConfigError, match="HTTP 401"):
            await cache.acquire(platform_config)
        assert cache.session is None

    @pytest.mark.asyncio
    async def test_response_without_token(
        self,
        cache: CredentialCache,
        fake_platform: FakeIdentityPlatform,
        platform_config: IdentityPlatformConfig,
    ) -> None:
        """A 2xx response must carry a token."""
        fake_platform.omit_vendor_token = True
        with pytest.raises(IdentityConfigError, match="did not include a token"):
            await cache.acquire(platform_config)

    @pytest.mark.asyncio
    async def test_transport_failure(
        self, platform_config: IdentityPlatformConfig
    ) -> None:
        """Network errors surface as API errors without a status."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            cache = CredentialCache(http)
            with pytest.raises(IdentityAPIError) as exc_info:
                await cache.acquire(platform_config)

        assert exc_info.value.status_code is None
        assert exc_info.value.operation == "Vendor authentication"
