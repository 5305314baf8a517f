"""Ordered membership changes for one user and target tenant.

The sequence is add, then remove from the holding tenant, then maybe
disable. Adding first means a failed removal leaves the user in two
tenants rather than none. The first failure aborts the remaining steps;
each step is safe to repeat when the sender redelivers.
"""

from __future__ import annotations

import dataclasses
import typing as typ

from tenantry.reconciliation.observability import ReconciliationEventLogger

if typ.TYPE_CHECKING:
    from tenantry.events.models import InboundEvent
    from tenantry.identity.client import IdentityPlatformClient
    from tenantry.identity.models import Tenant
    from tenantry.reconciliation.population import PopulationOracle

__all__ = ["MembershipChanges", "MembershipReconciler"]


@dataclasses.dataclass(frozen=True, slots=True)
class MembershipChanges:
    """What the reconciler did.

    ``None`` marks a skipped step; ``False`` marks a step whose desired
    state already held.
    """

    added: bool
    removed: bool | None = None
    disabled: bool | None = None


class MembershipReconciler:
    """Apply the add, remove and disable steps in order.

    Parameters
    ----------
    client
        Identity platform client.
    oracle
        Population oracle consulted before disabling.
    default_tenant_id
        Holding tenant to remove the user from, if configured.
    event_logger
        Structured event logger.

    """

    def __init__(
        self,
        client: IdentityPlatformClient,
        oracle: PopulationOracle,
        *,
        default_tenant_id: str | None = None,
        event_logger: ReconciliationEventLogger | None = None,
    ) -> None:
        """Configure the reconciler."""
        self._client = client
        self._oracle = oracle
        self._default_tenant_id = default_tenant_id
        self._events = event_logger or ReconciliationEventLogger()

    async def reconcile(
        self,
        event: InboundEvent,
        tenant: Tenant,
        *,
        email: str,
    ) -> MembershipChanges:
        """Bring the user's memberships in line with ``tenant``.

        Parameters
        ----------
        event : InboundEvent
            Normalized lifecycle event naming the user.
        tenant : Tenant
            Resolved target tenant.
        email : str
            Validated email, used when the user id is unknown.

        Returns
        -------
        MembershipChanges
            Outcome of each step.

        Raises
        ------
        IdentityAPIError
            On the first step that fails; later steps do not run.

        """
        added = await self.add(event, tenant, email=email)
        removed = await self.remove_from_default(event, tenant)
        disabled = await self.disable_if_not_first(event, tenant)
        return MembershipChanges(added=added, removed=removed, disabled=disabled)

    async def add(self, event: InboundEvent, tenant: Tenant, *, email: str) -> bool:
        """Add the user to ``tenant`` by id, or invite by email without one.

        Returns
        -------
        bool
            ``False`` only when the user was already a member.

        """
        if event.user_id:
            changed = await self._client.add_user_to_tenant(
                event.user_id, tenant.tenant_id
            )
            self._events.log_step("add", tenant_id=tenant.tenant_id, changed=changed)
            return changed

        await self._client.invite_user_by_email(
            tenant.tenant_id, email, name=event.display_name
        )
        self._events.log_step("invite", tenant_id=tenant.tenant_id, changed=True)
        return True

    async def remove_from_default(
        self, event: InboundEvent, tenant: Tenant
    ) -> bool | None:
        """Remove the user from the holding tenant, when that applies.

        Returns
        -------
        bool | None
            ``None`` when skipped: no holding tenant is configured, the
            target is the holding tenant, or the user id is unknown.

        """
        holding = self._default_tenant_id
        if holding is None:
            self._events.log_step_skipped("remove", "no default tenant configured")
            return None
        if holding == tenant.tenant_id:
            self._events.log_step_skipped("remove", "target is the default tenant")
            return None
        if not event.user_id:
            self._events.log_step_skipped("remove", "user id unknown")
            return None

        changed = await self._client.remove_user_from_tenant(event.user_id, holding)
        self._events.log_step("remove", tenant_id=holding, changed=changed)
        return changed

    async def disable_if_not_first(
        self, event: InboundEvent, tenant: Tenant
    ) -> bool | None:
        """Disable the user unless they are the tenant's first member."""
        if not event.user_id:
            self._events.log_step_skipped("disable", "user id unknown")
            return None
        if not await self._oracle.has_at_least_two_members(tenant.tenant_id):
            self._events.log_step_skipped("disable", "first member of tenant")
            return False

        await self._client.disable_user_in_tenant(event.user_id, tenant.tenant_id)
        self._events.log_step("disable", tenant_id=tenant.tenant_id, changed=True)
        return True
