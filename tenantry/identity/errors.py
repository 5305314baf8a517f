"""Errors raised while talking to the identity platform."""

from __future__ import annotations


class IdentityPlatformError(Exception):
    """Base class for identity platform failures.

    Messages carry operation names and HTTP status codes only; tokens,
    secrets and response bodies never appear in them.
    """


class IdentityAPIError(IdentityPlatformError):
    """Raised when the platform answers with an unexpected status.

    Attributes
    ----------
    operation
        Human-readable name of the failed operation.
    status_code
        HTTP status code, or ``None`` for transport failures.

    """

    def __init__(
        self,
        message: str,
        *,
        operation: str,
        status_code: int | None = None,
    ) -> None:
        """Initialise with a message, operation name and optional status."""
        self.operation = operation
        self.status_code = status_code
        super().__init__(message)

    @classmethod
    def http_error(cls, operation: str, status_code: int) -> IdentityAPIError:
        """Return an error for a non-accepted HTTP response."""
        return cls(
            f"{operation} failed: HTTP {status_code}",
            operation=operation,
            status_code=status_code,
        )

    @classmethod
    def timeout(cls, operation: str) -> IdentityAPIError:
        """Return an error for a request that timed out."""
        return cls(f"{operation} failed: request timed out", operation=operation)

    @classmethod
    def network_error(cls, operation: str, exc: Exception) -> IdentityAPIError:
        """Return an error for DNS, connection or TLS failures."""
        return cls(
            f"{operation} failed: network error ({type(exc).__name__})",
            operation=operation,
        )


class IdentityResponseShapeError(IdentityPlatformError):
    """Raised when a successful response lacks the fields we consume."""

    @classmethod
    def missing(cls, operation: str, field: str) -> IdentityResponseShapeError:
        """Return an error for a missing response field."""
        return cls(f"{operation} response missing expected field: {field}")


class IdentityConfigError(IdentityPlatformError):
    """Raised when platform credentials are absent or rejected.

    A rejected credential exchange is treated as misconfiguration rather
    than a transient failure.
    """

    @classmethod
    def missing_credentials(cls) -> IdentityConfigError:
        """Return an error when no client id or secret is configured."""
        return cls("TENANTRY_CLIENT_ID and TENANTRY_API_KEY are required")

    @classmethod
    def credential_exchange_failed(cls, status_code: int) -> IdentityConfigError:
        """Return an error for a rejected vendor credential exchange."""
        return cls(f"Vendor authentication failed: HTTP {status_code}")

    @classmethod
    def missing_token(cls) -> IdentityConfigError:
        """Return an error when the exchange response carries no token."""
        return cls("Vendor authentication response did not include a token")
