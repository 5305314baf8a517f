"""Find-or-create resolution of target tenants."""

from __future__ import annotations

import typing as typ

from tenantry.logging import get_logger, log_info

if typ.TYPE_CHECKING:
    from tenantry.identity.client import IdentityPlatformClient
    from tenantry.identity.models import Tenant

__all__ = ["TenantResolver"]

logger = get_logger(__name__)


class TenantResolver:
    """Resolve a tenant by name, creating it when no match exists.

    The platform's lookup is a free-text filter rather than an exact index,
    so the first match is taken as-is and further matches are ignored.
    Creation is not preceded by a second lookup.

    Parameters
    ----------
    client
        Identity platform client.
    default_app_id
        Application to assign to every resolved tenant, if any.

    """

    def __init__(
        self,
        client: IdentityPlatformClient,
        *,
        default_app_id: str | None = None,
    ) -> None:
        """Configure the resolver."""
        self._client = client
        self._default_app_id = default_app_id

    async def resolve(self, name: str) -> Tenant:
        """Return the tenant called ``name``, creating it if needed.

        Parameters
        ----------
        name : str
            Declared or derived tenant name.

        Returns
        -------
        Tenant
            The first lookup match, or the newly created tenant.

        Raises
        ------
        IdentityAPIError
            If lookup, creation or application assignment fails.

        """
        matches = await self._client.find_tenants(name, limit=1)
        if matches:
            tenant = matches[0]
            log_info(logger, "Reusing tenant %s (%s)", tenant.name, tenant.tenant_id)
        else:
            tenant = await self._client.create_tenant(name)
            log_info(logger, "Created tenant %s (%s)", tenant.name, tenant.tenant_id)

        if self._default_app_id is not None:
            await self._client.assign_application(
                self._default_app_id, tenant.tenant_id
            )
        return tenant
