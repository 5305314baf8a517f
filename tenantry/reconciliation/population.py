"""Cheap "does this tenant already have company" check."""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    from tenantry.identity.client import IdentityPlatformClient

__all__ = ["PopulationOracle"]

_THRESHOLD = 2


class PopulationOracle:
    """Answer whether a tenant has at least two members.

    Only one page of at most two users is ever requested, so the cost is
    constant regardless of tenant size.
    """

    def __init__(self, client: IdentityPlatformClient) -> None:
        """Bind the oracle to a platform client."""
        self._client = client

    async def has_at_least_two_members(self, tenant_id: str) -> bool:
        """Return True when ``tenant_id`` has two or more members.

        An explicit total in the response is preferred; otherwise the
        returned items are counted.

        Parameters
        ----------
        tenant_id : str
            Tenant to inspect.

        Returns
        -------
        bool
            ``True`` if the tenant already had a member besides the one
            just added.

        """
        page = await self._client.list_tenant_users(tenant_id, limit=_THRESHOLD)
        total = page.reported_total()
        if total is None:
            total = len(page.items)
        return total >= _THRESHOLD
