"""Shared fixtures for unit and feature tests."""

from __future__ import annotations

import typing as typ

import httpx
import pytest
import pytest_asyncio

from tenantry.identity import CredentialCache, IdentityPlatformClient
from tenantry.identity.config import IdentityPlatformConfig
from tenantry.reconciliation.config import WebhookSettings
from tests.helpers.identity_platform import BASE_URL, FakeIdentityPlatform
from tests.helpers.payloads import DEFAULT_APP_ID, HOLDING_TENANT_ID, WEBHOOK_SECRET

_SETTINGS_ENV = (
    "TENANTRY_API_BASE_URL",
    "TENANTRY_CLIENT_ID",
    "TENANTRY_API_KEY",
    "TENANTRY_HTTP_TIMEOUT_S",
    "TENANTRY_WEBHOOK_SECRET",
    "TENANTRY_DEFAULT_APP_ID",
    "TENANTRY_DEFAULT_TENANT_ID",
    "TENANTRY_DRY_RUN",
    "TENANTRY_DOMAIN_OVERRIDES",
)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Remove every Tenantry variable from the environment."""
    for name in _SETTINGS_ENV:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def platform_config() -> IdentityPlatformConfig:
    """Return platform settings pointing at the fake platform."""
    return IdentityPlatformConfig(
        base_url=BASE_URL,
        client_id="vendor-client",
        api_key="vendor-secret",
    )


@pytest.fixture
def settings(platform_config: IdentityPlatformConfig) -> WebhookSettings:
    """Return fully configured live-mode webhook settings."""
    return WebhookSettings(
        platform=platform_config,
        webhook_secret=WEBHOOK_SECRET,
        default_app_id=DEFAULT_APP_ID,
        default_tenant_id=HOLDING_TENANT_ID,
    )


@pytest.fixture
def fake_platform() -> FakeIdentityPlatform:
    """Return an empty fake identity platform."""
    return FakeIdentityPlatform()


@pytest_asyncio.fixture
async def http_client(
    fake_platform: FakeIdentityPlatform,
) -> typ.AsyncIterator[httpx.AsyncClient]:
    """Yield an ``httpx.AsyncClient`` routed to the fake platform."""
    async with httpx.AsyncClient(transport=fake_platform.transport()) as client:
        yield client


@pytest.fixture
def credentials(http_client: httpx.AsyncClient) -> CredentialCache:
    """Return an empty credential cache bound to the fake platform."""
    return CredentialCache(http_client)


@pytest.fixture
def identity_client(
    platform_config: IdentityPlatformConfig,
    credentials: CredentialCache,
    http_client: httpx.AsyncClient,
) -> IdentityPlatformClient:
    """Return a platform client wired to the fake platform."""
    return IdentityPlatformClient(
        platform_config, credentials=credentials, http_client=http_client
    )
