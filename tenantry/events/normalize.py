"""Map raw webhook payloads onto :class:`InboundEvent`.

The platform has shipped more than one payload layout over time: a
top-level ``eventKey`` with ``user``/``eventContext`` objects, and a
top-level ``key`` with everything nested under ``data``. Each field is
described by an ordered tuple of candidate paths; the first path holding a
non-empty string wins. Missing or mistyped values resolve to ``None``.

Examples
--------
>>> event = normalize_event({"key": "frontegg.user.signedUp",
...                          "data": {"user": {"email": "a@acme.io"}}})
>>> event.email
'a@acme.io'

"""

from __future__ import annotations

import json
import typing as typ

from tenantry.events.models import InboundEvent

__all__ = ["FIELD_RULES", "normalize_event"]

Path = tuple[str, ...]

# Most specific location first.
FIELD_RULES: dict[str, tuple[Path, ...]] = {
    "kind": (("eventKey",), ("key",)),
    "user_id": (
        ("eventContext", "userId"),
        ("user", "id"),
        ("data", "user", "id"),
    ),
    "email": (("user", "email"), ("data", "user", "email")),
    "display_name": (("user", "name"), ("data", "user", "name")),
    "declared_tenant_name": (
        ("user", "metadata", "tenantName"),
        ("data", "user", "metadata", "tenantName"),
    ),
    "source_tenant_id": (
        ("eventContext", "tenantId"),
        ("data", "tenant", "tenantId"),
        ("data", "tenant", "id"),
        ("user", "tenantId"),
        ("data", "user", "tenantId"),
    ),
}


# ``metadata`` is sometimes delivered as a JSON-encoded string.
_JSON_STRING_KEYS = frozenset({"metadata"})


def _decode_json_string(value: str) -> object:
    try:
        return json.loads(value)
    except ValueError:
        return None


def _lookup(payload: object, path: Path) -> str | None:
    node = payload
    parent_key: str | None = None
    for key in path:
        if isinstance(node, str) and parent_key in _JSON_STRING_KEYS:
            node = _decode_json_string(node)
        if not isinstance(node, dict):
            return None
        node = typ.cast("dict[str, object]", node).get(key)
        parent_key = key
    if isinstance(node, str):
        value = node.strip()
        return value or None
    return None


def _first_match(payload: object, paths: tuple[Path, ...]) -> str | None:
    for path in paths:
        value = _lookup(payload, path)
        if value is not None:
            return value
    return None


def normalize_event(payload: object) -> InboundEvent:
    """Extract an :class:`InboundEvent` from an untyped JSON tree.

    Never raises. A payload that is not a JSON object yields an event with
    an empty ``kind``, which no filter treats as actionable.
    """
    fields = {name: _first_match(payload, paths) for name, paths in FIELD_RULES.items()}
    kind = fields.pop("kind") or ""
    return InboundEvent(kind=kind, **fields)
