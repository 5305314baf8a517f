"""Structured log events for webhook reconciliation.

Every delivery ends in exactly one of the ``reconciliation.event.*`` events
below; individual membership steps are logged as
``reconciliation.step.*``. Messages follow the ``[event] key=value`` layout
so log aggregators can parse them.
"""

from __future__ import annotations

import enum
import typing as typ

from tenantry.identity.errors import (
    IdentityAPIError,
    IdentityConfigError,
    IdentityResponseShapeError,
)
from tenantry.logging import get_logger, log_error, log_info, log_warning
from tenantry.reconciliation.errors import ConfigurationError

if typ.TYPE_CHECKING:
    from tenantry.events.models import InboundEvent

logger = get_logger(__name__)

_HTTP_SERVER_ERROR_THRESHOLD = 500


class ReconciliationEventType(enum.StrEnum):
    """Structured log event types for webhook handling."""

    EVENT_IGNORED = "reconciliation.event.ignored"
    EVENT_ACKNOWLEDGED = "reconciliation.event.acknowledged"
    EVENT_DRY_RUN = "reconciliation.event.dry_run"
    RUN_STARTED = "reconciliation.run.started"
    RUN_COMPLETED = "reconciliation.run.completed"
    RUN_FAILED = "reconciliation.run.failed"
    STEP_APPLIED = "reconciliation.step.applied"
    STEP_SKIPPED = "reconciliation.step.skipped"


class ErrorCategory(enum.StrEnum):
    """Failure categories used for alert routing."""

    TRANSIENT = "transient"
    CLIENT_ERROR = "client_error"
    SCHEMA_DRIFT = "schema_drift"
    CONFIGURATION = "configuration"
    UNKNOWN = "unknown"


_EXCEPTION_CATEGORY_MAP: tuple[tuple[type[BaseException], ErrorCategory], ...] = (
    (IdentityResponseShapeError, ErrorCategory.SCHEMA_DRIFT),
    (IdentityConfigError, ErrorCategory.CONFIGURATION),
    (ConfigurationError, ErrorCategory.CONFIGURATION),
)


def categorize_error(exc: BaseException) -> ErrorCategory:
    """Categorize an exception for alerting purposes.

    Upstream 5xx responses and transport failures (no status code) are
    transient; other upstream statuses are client errors.
    """
    if isinstance(exc, IdentityAPIError):
        if exc.status_code is None or exc.status_code >= _HTTP_SERVER_ERROR_THRESHOLD:
            return ErrorCategory.TRANSIENT
        return ErrorCategory.CLIENT_ERROR

    for exc_type, category in _EXCEPTION_CATEGORY_MAP:
        if isinstance(exc, exc_type):
            return category

    return ErrorCategory.UNKNOWN


class ReconciliationEventLogger:
    """Emit structured reconciliation events via femtologging.

    Emails are never logged; the user identifier and event kind are enough
    to correlate with the platform's own audit log.
    """

    def log_ignored(self, event: InboundEvent, reason: str) -> None:
        """Log an event acknowledged without action."""
        log_info(
            logger,
            "[%s] kind=%s source_tenant_id=%s reason=%s",
            ReconciliationEventType.EVENT_IGNORED,
            event.kind or "<empty>",
            event.source_tenant_id,
            reason,
        )

    def log_missing_email(self, event: InboundEvent) -> None:
        """Log an actionable event that cannot be reconciled."""
        log_error(
            logger,
            "[%s] kind=%s user_id=%s reason=missing usable email",
            ReconciliationEventType.EVENT_ACKNOWLEDGED,
            event.kind,
            event.user_id,
        )

    def log_dry_run(self, event: InboundEvent, tenant_name: str) -> None:
        """Log the action a dry run would have taken."""
        log_info(
            logger,
            "[%s] kind=%s user_id=%s tenant_name=%s action=%s",
            ReconciliationEventType.EVENT_DRY_RUN,
            event.kind,
            event.user_id,
            tenant_name,
            "add_by_id" if event.user_id else "invite_by_email",
        )

    def log_started(self, event: InboundEvent, tenant_name: str) -> None:
        """Log the start of a reconciliation run."""
        log_info(
            logger,
            "[%s] kind=%s user_id=%s tenant_name=%s",
            ReconciliationEventType.RUN_STARTED,
            event.kind,
            event.user_id,
            tenant_name,
        )

    def log_step(self, step: str, *, tenant_id: str, changed: bool) -> None:
        """Log one applied membership step."""
        log_info(
            logger,
            "[%s] step=%s tenant_id=%s changed=%s",
            ReconciliationEventType.STEP_APPLIED,
            step,
            tenant_id,
            changed,
        )

    def log_step_skipped(self, step: str, reason: str) -> None:
        """Log a membership step that did not apply to this event."""
        log_info(
            logger,
            "[%s] step=%s reason=%s",
            ReconciliationEventType.STEP_SKIPPED,
            step,
            reason,
        )

    def log_completed(self, event: InboundEvent, tenant_id: str) -> None:
        """Log a successful reconciliation."""
        log_info(
            logger,
            "[%s] kind=%s user_id=%s tenant_id=%s",
            ReconciliationEventType.RUN_COMPLETED,
            event.kind,
            event.user_id,
            tenant_id,
        )

    def log_failed(self, event: InboundEvent, error: BaseException) -> None:
        """Log a failed reconciliation with its error category."""
        category = categorize_error(error)
        level_log = log_warning if category is ErrorCategory.TRANSIENT else log_error
        level_log(
            logger,
            "[%s] kind=%s user_id=%s error_type=%s error_category=%s "
            "error_message=%s",
            ReconciliationEventType.RUN_FAILED,
            event.kind,
            event.user_id,
            type(error).__name__,
            category,
            str(error),
            exc_info=error,
        )
