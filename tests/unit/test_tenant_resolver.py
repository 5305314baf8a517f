"""Unit tests for find-or-create tenant resolution."""

from __future__ import annotations

import pytest

from tenantry.identity import IdentityAPIError, IdentityPlatformClient
from tenantry.reconciliation import TenantResolver
from tests.helpers.identity_platform import FakeIdentityPlatform


class TestTenantResolver:
    """Tests for TenantResolver.resolve."""

    @pytest.mark.asyncio
    async def test_existing_tenant_is_reused(
        self,
        identity_client: IdentityPlatformClient,
        fake_platform: FakeIdentityPlatform,
    ) -> None:
        """A filter match short-circuits creation."""
        fake_platform.add_tenant("t-9", "Initech")

        tenant = await TenantResolver(identity_client).resolve("Initech")

        assert tenant.tenant_id == "t-9"
        assert fake_platform.calls("POST", "/tenants") == []

    @pytest.mark.asyncio
    async def test_first_of_several_matches_wins(
        self,
        identity_client: IdentityPlatformClient,
        fake_platform: FakeIdentityPlatform,
    ) -> None:
        """Ambiguous filters resolve to the first result, unverified."""
        fake_platform.add_tenant("t-1", "Initech Labs")
        fake_platform.add_tenant("t-2", "Initech")

        tenant = await TenantResolver(identity_client).resolve("Initech")

        assert tenant.tenant_id == "t-1"

    @pytest.mark.asyncio
    async def test_missing_tenant_is_created(
        self,
        identity_client: IdentityPlatformClient,
        fake_platform: FakeIdentityPlatform,
    ) -> None:
        """No match means exactly one creation call."""
        tenant = await TenantResolver(identity_client).resolve("Initech")

        assert fake_platform.tenants == {tenant.tenant_id: "Initech"}
        assert len(fake_platform.calls("POST", "/tenants/resources/tenants/v1")) == 1

    @pytest.mark.asyncio
    async def test_default_app_is_assigned(
        self,
        identity_client: IdentityPlatformClient,
        fake_platform: FakeIdentityPlatform,
    ) -> None:
        """Every resolved tenant gets the default application."""
        fake_platform.add_tenant("t-1", "Initech")
        fake_platform.app_assignments.add(("app-1", "t-1"))

        resolver = TenantResolver(identity_client, default_app_id="app-1")
        tenant = await resolver.resolve("Initech")

        assert tenant.tenant_id == "t-1"
        assert len(fake_platform.calls("POST", "/applications")) == 1

    @pytest.mark.asyncio
    async def test_no_app_assignment_without_default(
        self,
        identity_client: IdentityPlatformClient,
        fake_platform: FakeIdentityPlatform,
    ) -> None:
        """Without a default app no assignment call is made."""
        await TenantResolver(identity_client).resolve("Initech")
        assert fake_platform.calls("POST", "/applications") == []

    @pytest.mark.asyncio
    async def test_assignment_failure_propagates(
        self,
        identity_client: IdentityPlatformClient,
        fake_platform: FakeIdentityPlatform,
    ) -> None:
        """Only 409 is tolerated on assignment."""
        fake_platform.fail(
            "POST",
            "/applications/resources/applications/tenant-assignments/v1/app-1",
            403,
        )
        resolver = TenantResolver(identity_client, default_app_id="app-1")

        with pytest.raises(IdentityAPIError) as exc_info:
            await resolver.resolve("Initech")

        assert exc_info.value.status_code == 403
