"""Configuration for the identity platform management API."""

from __future__ import annotations

import dataclasses
import os

_DEFAULT_BASE_URL = "https://api.frontegg.com"
_DEFAULT_TIMEOUT_S = 5.0


def _read(name: str) -> str:
    return os.environ.get(name, "").strip()


def _parse_timeout(raw: str) -> float:
    if not raw:
        return _DEFAULT_TIMEOUT_S
    try:
        value = float(raw)
    except ValueError as exc:
        msg = f"TENANTRY_HTTP_TIMEOUT_S must be a number, got: {raw!r}"
        raise ValueError(msg) from exc
    if value <= 0:
        msg = f"TENANTRY_HTTP_TIMEOUT_S must be positive, got: {value}"
        raise ValueError(msg)
    return value


@dataclasses.dataclass(frozen=True, slots=True)
class IdentityPlatformConfig:
    """Connection settings for the identity platform.

    Credentials are optional at construction time. They are checked when a
    vendor token is first needed, so a dry-run deployment can start without
    them.

    Attributes
    ----------
    base_url
        Regional API root, without a trailing slash.
    client_id
        Vendor client identifier used for the credential exchange.
    api_key
        Vendor secret paired with ``client_id``.
    timeout_s
        Per-request timeout for every platform call.

    """

    base_url: str = _DEFAULT_BASE_URL
    client_id: str = ""
    api_key: str = dataclasses.field(default="", repr=False)
    timeout_s: float = _DEFAULT_TIMEOUT_S

    def __post_init__(self) -> None:
        """Strip any trailing slash from ``base_url``."""
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

    @property
    def has_credentials(self) -> bool:
        """Return True when both client id and secret are present."""
        return bool(self.client_id and self.api_key)

    def url(self, path: str) -> str:
        """Join ``path`` onto the configured base URL."""
        return f"{self.base_url}/{path.lstrip('/')}"

    @classmethod
    def from_env(cls) -> IdentityPlatformConfig:
        """Build configuration from environment variables.

        Reads ``TENANTRY_API_BASE_URL``, ``TENANTRY_CLIENT_ID``,
        ``TENANTRY_API_KEY`` and ``TENANTRY_HTTP_TIMEOUT_S``.

        Raises
        ------
        ValueError
            If ``TENANTRY_HTTP_TIMEOUT_S`` is not a positive number.

        """
        return cls(
            base_url=_read("TENANTRY_API_BASE_URL") or _DEFAULT_BASE_URL,
            client_id=_read("TENANTRY_CLIENT_ID"),
            api_key=_read("TENANTRY_API_KEY"),
            timeout_s=_parse_timeout(_read("TENANTRY_HTTP_TIMEOUT_S")),
        )
