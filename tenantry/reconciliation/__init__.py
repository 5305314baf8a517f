"""Tenant resolution and membership reconciliation pipeline."""

from __future__ import annotations

from .config import WebhookSettings
from .errors import ConfigurationError
from .naming import derive_tenant_name, target_tenant_name
from .observability import ErrorCategory, ReconciliationEventLogger, categorize_error
from .outcome import OutcomeKind, ReconciliationOutcome
from .population import PopulationOracle
from .reconciler import MembershipChanges, MembershipReconciler
from .resolver import TenantResolver
from .service import ReconciliationService

__all__ = [
    "ConfigurationError",
    "ErrorCategory",
    "MembershipChanges",
    "MembershipReconciler",
    "OutcomeKind",
    "PopulationOracle",
    "ReconciliationEventLogger",
    "ReconciliationOutcome",
    "ReconciliationService",
    "TenantResolver",
    "WebhookSettings",
    "categorize_error",
    "derive_tenant_name",
    "target_tenant_name",
]
