"""Webhook and reconciliation settings.

Settings are read from the environment on every request rather than once at
startup, so an operator can correct configuration without a redeploy and
missing values surface on the request that needs them.

Usage
-----
>>> import os
>>> os.environ["TENANTRY_DRY_RUN"] = "true"
>>> WebhookSettings.from_env().dry_run
True

"""

from __future__ import annotations

import dataclasses as dc
import os
import types
import typing as typ

from tenantry.identity.config import IdentityPlatformConfig

__all__ = ["WebhookSettings", "env_flag", "parse_domain_overrides"]

_TRUTHY = frozenset({"1", "true", "yes", "on"})


def env_flag(name: str) -> bool:
    """Return True when the variable holds 1, true, yes or on."""
    return os.environ.get(name, "").strip().lower() in _TRUTHY


def _optional(name: str) -> str | None:
    value = os.environ.get(name, "").strip()
    return value or None


def parse_domain_overrides(raw: str) -> typ.Mapping[str, str]:
    """Parse ``domain=Tenant`` pairs separated by commas.

    Domains are lowercased. Blank entries are skipped.

    Raises
    ------
    ValueError
        If an entry lacks ``=`` or has an empty side.

    Examples
    --------
    >>> dict(parse_domain_overrides("gmail.com=Personal, Example.org=Examples"))
    {'gmail.com': 'Personal', 'example.org': 'Examples'}

    """
    overrides: dict[str, str] = {}
    for entry in raw.split(","):
        if not entry.strip():
            continue
        domain, sep, tenant_name = entry.partition("=")
        domain = domain.strip().lower()
        tenant_name = tenant_name.strip()
        if not sep or not domain or not tenant_name:
            msg = f"TENANTRY_DOMAIN_OVERRIDES entry must be domain=Name, got: {entry!r}"
            raise ValueError(msg)
        overrides[domain] = tenant_name
    return types.MappingProxyType(overrides)


@dc.dataclass(frozen=True, slots=True)
class WebhookSettings:
    """Everything one webhook request needs to know about its environment.

    Attributes
    ----------
    platform
        Identity platform connection settings.
    webhook_secret
        Shared secret, or HS256 key, expected in ``x-webhook-secret``.
    default_app_id
        Application assigned to every resolved tenant, when set.
    default_tenant_id
        Holding tenant new users land in. Required for invitation events.
    dry_run
        Derive and log the intended action without calling the platform.
    domain_overrides
        Fixed tenant names for specific email domains.

    """

    platform: IdentityPlatformConfig = dc.field(default_factory=IdentityPlatformConfig)
    webhook_secret: str | None = dc.field(default=None, repr=False)
    default_app_id: str | None = None
    default_tenant_id: str | None = None
    dry_run: bool = False
    domain_overrides: typ.Mapping[str, str] = dc.field(
        default_factory=lambda: types.MappingProxyType({})
    )

    def missing_for_readiness(self) -> list[str]:
        """Return the environment variables a live deployment still needs."""
        missing: list[str] = []
        if not self.webhook_secret:
            missing.append("TENANTRY_WEBHOOK_SECRET")
        if not self.dry_run and not self.platform.has_credentials:
            missing.extend(("TENANTRY_CLIENT_ID", "TENANTRY_API_KEY"))
        return missing

    @classmethod
    def from_env(cls) -> WebhookSettings:
        """Build settings from environment variables.

        Reads ``TENANTRY_WEBHOOK_SECRET``, ``TENANTRY_DEFAULT_APP_ID``,
        ``TENANTRY_DEFAULT_TENANT_ID``, ``TENANTRY_DRY_RUN`` and
        ``TENANTRY_DOMAIN_OVERRIDES`` in addition to the platform variables
        read by :meth:`IdentityPlatformConfig.from_env`.

        Raises
        ------
        ValueError
            If a numeric or structured variable cannot be parsed.

        """
        return cls(
            platform=IdentityPlatformConfig.from_env(),
            webhook_secret=_optional("TENANTRY_WEBHOOK_SECRET"),
            default_app_id=_optional("TENANTRY_DEFAULT_APP_ID"),
            default_tenant_id=_optional("TENANTRY_DEFAULT_TENANT_ID"),
            dry_run=env_flag("TENANTRY_DRY_RUN"),
            domain_overrides=parse_domain_overrides(
                os.environ.get("TENANTRY_DOMAIN_OVERRIDES", "")
            ),
        )
