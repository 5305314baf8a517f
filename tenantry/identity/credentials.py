"""Process-wide cache for the vendor bearer token.

The cache holds a single :class:`VendorSession`. Refreshing only reads a
new token, so concurrent refreshes are harmless: each request assigns a
complete session object and the last writer wins. No lock is taken.

Usage
-----
Share one cache across all requests::

    cache = CredentialCache(http_client)
    token = await cache.acquire(IdentityPlatformConfig.from_env())

"""

from __future__ import annotations

import dataclasses
import datetime as dt
import typing as typ

import httpx

from tenantry.identity.errors import IdentityAPIError, IdentityConfigError
from tenantry.logging import get_logger, log_info

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from tenantry.identity.config import IdentityPlatformConfig

__all__ = ["DEFAULT_SESSION_TTL", "CredentialCache", "VendorSession"]

logger = get_logger(__name__)

# Shorter than the platform's own token lifetime so a token never expires
# mid-request.
DEFAULT_SESSION_TTL = dt.timedelta(hours=6)

_VENDOR_AUTH_PATH = "auth/vendor"
_OPERATION = "Vendor authentication"


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.UTC)


@dataclasses.dataclass(frozen=True, slots=True)
class VendorSession:
    """A vendor bearer token and the instant it stops being handed out."""

    token: str = dataclasses.field(repr=False)
    expires_at: dt.datetime
    client_id: str

    def is_valid_for(self, client_id: str, now: dt.datetime) -> bool:
        """Return True when the session belongs to ``client_id`` and is live."""
        return self.client_id == client_id and now < self.expires_at


class CredentialCache:
    """Single-slot cache of the vendor session.

    Parameters
    ----------
    http_client
        Client used for the credential exchange call.
    ttl
        How long a fetched token is reused.
    clock
        Source of the current UTC time; injectable for tests.

    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        *,
        ttl: dt.timedelta = DEFAULT_SESSION_TTL,
        clock: cabc.Callable[[], dt.datetime] = _utcnow,
    ) -> None:
        """Initialise an empty cache."""
        self._client = http_client
        self._ttl = ttl
        self._clock = clock
        self._session: VendorSession | None = None

    @property
    def session(self) -> VendorSession | None:
        """Return the cached session, expired or not."""
        return self._session

    def clear(self) -> None:
        """Drop the cached session."""
        self._session = None

    async def acquire(self, config: IdentityPlatformConfig) -> str:
        """Return a valid bearer token, refreshing it when needed.

        Raises
        ------
        IdentityConfigError
            If credentials are missing, the exchange is rejected, or the
            response carries no token.
        IdentityAPIError
            If the exchange fails at the transport level.

        """
        session = self._session
        if session is not None and session.is_valid_for(
            config.client_id, self._clock()
        ):
            return session.token

        session = await self._exchange(config)
        self._session = session
        return session.token

    async def _exchange(self, config: IdentityPlatformConfig) -> VendorSession:
        if not config.has_credentials:
            raise IdentityConfigError.missing_credentials()

        try:
            response = await self._client.post(
                config.url(_VENDOR_AUTH_PATH),
                json={"clientId": config.client_id, "secret": config.api_key},
                timeout=config.timeout_s,
            )
        except httpx.TimeoutException as exc:
            raise IdentityAPIError.timeout(_OPERATION) from exc
        except httpx.RequestError as exc:
            raise IdentityAPIError.network_error(_OPERATION, exc) from exc

        if not response.is_success:
            raise IdentityConfigError.credential_exchange_failed(response.status_code)

        try:
            body = response.json()
        except ValueError as exc:
            raise IdentityConfigError.missing_token() from exc
        token = body.get("token") if isinstance(body, dict) else None
        if not isinstance(token, str) or not token:
            raise IdentityConfigError.missing_token()

        expires_at = self._clock() + self._ttl
        log_info(
            logger,
            "Refreshed vendor session for client %s; valid until %s",
            config.client_id,
            expires_at.isoformat(),
        )
        return VendorSession(
            token=token, expires_at=expires_at, client_id=config.client_id
        )
