"""Canonical inbound lifecycle event."""

from __future__ import annotations

import dataclasses
import enum


class EventKind(enum.StrEnum):
    """Lifecycle event kinds that trigger reconciliation."""

    USER_SIGNED_UP = "frontegg.user.signedUp"
    USER_INVITED_TO_TENANT = "frontegg.user.invitedToTenant"


@dataclasses.dataclass(frozen=True, slots=True)
class InboundEvent:
    """A lifecycle event reduced to the fields reconciliation consumes.

    Attributes
    ----------
    kind
        Event key as sent by the platform; empty for malformed payloads.
    user_id
        Platform user identifier, when the payload carries one.
    email
        User email exactly as delivered.
    display_name
        User display name.
    declared_tenant_name
        Tenant name set upstream by a pre-processing hook. Takes precedence
        over a name derived from the email domain.
    source_tenant_id
        Tenant the invitation originated in.

    """

    kind: str
    user_id: str | None = None
    email: str | None = None
    display_name: str | None = None
    declared_tenant_name: str | None = None
    source_tenant_id: str | None = None

    @property
    def actionable_kind(self) -> EventKind | None:
        """Return the matching :class:`EventKind`, or ``None``."""
        try:
            return EventKind(self.kind)
        except ValueError:
            return None

    @property
    def is_invitation(self) -> bool:
        """Return True for invited-to-tenant events."""
        return self.actionable_kind is EventKind.USER_INVITED_TO_TENANT
