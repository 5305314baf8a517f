"""Webhook reconciliation pipeline.

``ReconciliationService.handle`` takes an already-authenticated, parsed
payload and carries it through normalization, filtering, tenant resolution
and membership reconciliation. Known failures are classified into a
:class:`ReconciliationOutcome`; anything else propagates.

Usage
-----
Share one service across requests::

    service = ReconciliationService(credentials=cache, http_client=http)
    outcome = await service.handle(payload, WebhookSettings.from_env())

"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from tenantry.events.normalize import normalize_event
from tenantry.identity.client import IdentityPlatformClient
from tenantry.identity.errors import IdentityPlatformError
from tenantry.reconciliation.errors import ConfigurationError
from tenantry.reconciliation.naming import email_domain, target_tenant_name
from tenantry.reconciliation.observability import (
    ReconciliationEventLogger,
    categorize_error,
)
from tenantry.reconciliation.outcome import ReconciliationOutcome
from tenantry.reconciliation.population import PopulationOracle
from tenantry.reconciliation.reconciler import MembershipReconciler
from tenantry.reconciliation.resolver import TenantResolver

if typ.TYPE_CHECKING:
    import httpx

    from tenantry.events.models import InboundEvent
    from tenantry.identity.credentials import CredentialCache
    from tenantry.reconciliation.config import WebhookSettings

__all__ = ["ReconciliationService"]


@dc.dataclass(frozen=True, slots=True)
class _Target:
    """An actionable event with its usable email and tenant name."""

    event: InboundEvent
    email: str
    tenant_name: str


class ReconciliationService:
    """Turn lifecycle events into tenant membership changes.

    Parameters
    ----------
    credentials
        Process-wide vendor token cache.
    http_client
        Shared HTTP client for platform calls.
    event_logger
        Structured event logger.

    """

    def __init__(
        self,
        *,
        credentials: CredentialCache,
        http_client: httpx.AsyncClient,
        event_logger: ReconciliationEventLogger | None = None,
    ) -> None:
        """Initialise the service with its shared collaborators."""
        self._credentials = credentials
        self._http_client = http_client
        self._events = event_logger or ReconciliationEventLogger()

    async def handle(
        self, payload: object, settings: WebhookSettings
    ) -> ReconciliationOutcome:
        """Reconcile the user described by ``payload``.

        Parameters
        ----------
        payload
            Parsed JSON body of the webhook request.
        settings
            Settings in force for this request.

        Returns
        -------
        ReconciliationOutcome
            Ignored for non-actionable events, acknowledged when nothing
            can or should be done, applied on success, failed on a
            configuration or platform error.

        """
        event = normalize_event(payload)
        try:
            decision = self._select(event, settings)
        except ConfigurationError as exc:
            self._events.log_failed(event, exc)
            return ReconciliationOutcome.failed(str(exc), categorize_error(exc))
        if isinstance(decision, ReconciliationOutcome):
            return decision

        if settings.dry_run:
            self._events.log_dry_run(event, decision.tenant_name)
            return ReconciliationOutcome.acknowledged(
                "dry run", tenant_name=decision.tenant_name, dry_run=True
            )

        try:
            return await self._apply(decision, settings)
        except IdentityPlatformError as exc:
            self._events.log_failed(event, exc)
            return ReconciliationOutcome.failed(str(exc), categorize_error(exc))

    def _select(
        self, event: InboundEvent, settings: WebhookSettings
    ) -> _Target | ReconciliationOutcome:
        """Filter the event and pick its target tenant name."""
        if event.actionable_kind is None:
            self._events.log_ignored(event, "event kind not actionable")
            return ReconciliationOutcome.ignored("event kind not actionable")

        if event.is_invitation:
            if settings.default_tenant_id is None:
                raise ConfigurationError.missing_default_tenant()
            if event.source_tenant_id != settings.default_tenant_id:
                self._events.log_ignored(event, "invitation from another tenant")
                return ReconciliationOutcome.ignored("invitation from another tenant")

        if event.email is None or email_domain(event.email) is None:
            self._events.log_missing_email(event)
            return ReconciliationOutcome.acknowledged("no usable email on payload")

        tenant_name = target_tenant_name(
            event.email,
            declared_name=event.declared_tenant_name,
            overrides=settings.domain_overrides,
        )
        return _Target(event=event, email=event.email, tenant_name=tenant_name)

    async def _apply(
        self, target: _Target, settings: WebhookSettings
    ) -> ReconciliationOutcome:
        """Resolve the tenant and run the membership steps."""
        self._events.log_started(target.event, target.tenant_name)
        client = IdentityPlatformClient(
            settings.platform,
            credentials=self._credentials,
            http_client=self._http_client,
        )
        resolver = TenantResolver(client, default_app_id=settings.default_app_id)
        reconciler = MembershipReconciler(
            client,
            PopulationOracle(client),
            default_tenant_id=settings.default_tenant_id,
            event_logger=self._events,
        )

        tenant = await resolver.resolve(target.tenant_name)
        await reconciler.reconcile(target.event, tenant, email=target.email)
        self._events.log_completed(target.event, tenant.tenant_id)
        return ReconciliationOutcome.applied(tenant)
