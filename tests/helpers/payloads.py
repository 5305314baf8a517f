"""Webhook payload builders in both historical layouts."""

from __future__ import annotations

import typing as typ

# Long enough to satisfy HMAC key-length checks in PyJWT.
WEBHOOK_SECRET = "whsec-0123456789abcdef0123456789abcdef"
HOLDING_TENANT_ID = "holding-tenant"
DEFAULT_APP_ID = "app-portal"

SIGNED_UP = "frontegg.user.signedUp"
INVITED = "frontegg.user.invitedToTenant"


def nested_payload(
    kind: str = SIGNED_UP,
    *,
    email: str | None = "new@initech.com",
    user_id: str | None = None,
    name: str | None = None,
    tenant: dict[str, typ.Any] | None = None,
) -> dict[str, typ.Any]:
    """Build a ``key`` + ``data.user`` payload."""
    user: dict[str, typ.Any] = {}
    if email is not None:
        user["email"] = email
    if user_id is not None:
        user["id"] = user_id
    if name is not None:
        user["name"] = name
    data: dict[str, typ.Any] = {"user": user}
    if tenant is not None:
        data["tenant"] = tenant
    return {"key": kind, "data": data}


def context_payload(
    kind: str = INVITED,
    *,
    email: str | None = "new@initech.com",
    user_id: str | None = None,
    tenant_id: str | None = None,
) -> dict[str, typ.Any]:
    """Build an ``eventKey`` + ``user`` + ``eventContext`` payload."""
    user: dict[str, typ.Any] = {}
    if email is not None:
        user["email"] = email
    context: dict[str, typ.Any] = {}
    if user_id is not None:
        user["id"] = user_id
        context["userId"] = user_id
    if tenant_id is not None:
        context["tenantId"] = tenant_id
    return {"eventKey": kind, "user": user, "eventContext": context}
