"""Result of handling one webhook delivery."""

from __future__ import annotations

import dataclasses
import enum
import typing as typ

if typ.TYPE_CHECKING:
    from tenantry.identity.models import Tenant
    from tenantry.reconciliation.observability import ErrorCategory


class OutcomeKind(enum.StrEnum):
    """How a delivery was disposed of."""

    IGNORED = "ignored"
    ACKNOWLEDGED = "acknowledged"
    APPLIED = "applied"
    FAILED = "failed"


@dataclasses.dataclass(frozen=True, slots=True)
class ReconciliationOutcome:
    """Disposition of one event; drives the HTTP status, never persisted.

    Attributes
    ----------
    kind
        Outcome category.
    reason
        Non-sensitive explanation for ignored, acknowledged and failed
        outcomes.
    tenant
        Resolved target tenant for applied outcomes.
    tenant_name
        Target tenant name, also set for dry runs where no tenant is
        resolved.
    dry_run
        True when the pipeline stopped before any platform call.
    category
        Failure category for failed outcomes.

    """

    kind: OutcomeKind
    reason: str | None = None
    tenant: Tenant | None = None
    tenant_name: str | None = None
    dry_run: bool = False
    category: ErrorCategory | None = None

    @classmethod
    def ignored(cls, reason: str) -> ReconciliationOutcome:
        """Return an outcome for events this service does not act on."""
        return cls(OutcomeKind.IGNORED, reason=reason)

    @classmethod
    def acknowledged(
        cls,
        reason: str,
        *,
        tenant_name: str | None = None,
        dry_run: bool = False,
    ) -> ReconciliationOutcome:
        """Return an outcome for actionable events that needed no change."""
        return cls(
            OutcomeKind.ACKNOWLEDGED,
            reason=reason,
            tenant_name=tenant_name,
            dry_run=dry_run,
        )

    @classmethod
    def applied(cls, tenant: Tenant) -> ReconciliationOutcome:
        """Return an outcome for a completed reconciliation."""
        return cls(OutcomeKind.APPLIED, tenant=tenant, tenant_name=tenant.name)

    @classmethod
    def failed(cls, reason: str, category: ErrorCategory) -> ReconciliationOutcome:
        """Return an outcome for a reconciliation aborted by an error."""
        return cls(OutcomeKind.FAILED, reason=reason, category=category)
