"""Errors raised by the reconciliation pipeline itself."""

from __future__ import annotations


class ConfigurationError(Exception):
    """Raised when a required webhook setting is absent."""

    @classmethod
    def missing_default_tenant(cls) -> ConfigurationError:
        """Return an error for invitation events without a holding tenant."""
        return cls("TENANTRY_DEFAULT_TENANT_ID is required for invitation events")
