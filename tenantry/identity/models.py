"""Typed views over identity platform responses."""

from __future__ import annotations

import typing as typ

import msgspec


class Tenant(msgspec.Struct, frozen=True, kw_only=True):
    """A tenant as returned by the platform's tenant endpoints.

    ``name`` is used as a best-effort lookup key only; the platform does
    not enforce uniqueness on it.
    """

    tenant_id: str = msgspec.field(name="tenantId")
    name: str = ""


class PageMetadata(msgspec.Struct, kw_only=True):
    """Pagination block attached to list responses."""

    total_items: int | None = msgspec.field(default=None, name="totalItems")


class UserPage(msgspec.Struct, kw_only=True):
    """One page of a tenant's user listing.

    Different platform versions report the total in different places, so
    every known location is optional.
    """

    items: list[typ.Any] = msgspec.field(default_factory=list)
    metadata: PageMetadata | None = msgspec.field(default=None, name="_metadata")
    total: int | None = None
    count: int | None = None

    def reported_total(self) -> int | None:
        """Return the explicit total, if the response carried one."""
        if self.metadata is not None and self.metadata.total_items is not None:
            return self.metadata.total_items
        if self.total is not None:
            return self.total
        return self.count


def tenant_from_item(item: object) -> Tenant | None:
    """Convert one tenant listing entry into a :class:`Tenant`.

    Entries missing ``tenantId`` fall back to ``id``. Entries with neither
    are ignored.
    """
    if not isinstance(item, dict):
        return None
    record = typ.cast("dict[str, typ.Any]", item)
    tenant_id = record.get("tenantId")
    if not isinstance(tenant_id, str) or not tenant_id:
        tenant_id = record.get("id")
    if not isinstance(tenant_id, str) or not tenant_id:
        return None
    name = record.get("name")
    record = {"tenantId": tenant_id, "name": name if isinstance(name, str) else ""}
    try:
        return msgspec.convert(record, type=Tenant)
    except msgspec.ValidationError:
        return None
