"""Request-level exceptions and their Falcon error handlers.

Usage
-----
Register the handlers on the Falcon app::

    app.add_error_handler(WebhookAuthenticationError, handle_authentication_error)
    app.add_error_handler(InvalidInputError, handle_invalid_input)
    app.add_error_handler(Exception, handle_unexpected_error)

"""

from __future__ import annotations

import typing as typ

import falcon

from tenantry.logging import get_logger, log_exception

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

__all__ = [
    "InvalidInputError",
    "WebhookAuthenticationError",
    "handle_authentication_error",
    "handle_invalid_input",
    "handle_unexpected_error",
]

logger = get_logger(__name__)


class WebhookAuthenticationError(Exception):
    """Raised when a webhook call lacks a valid secret or signed assertion."""

    def __init__(self) -> None:
        """Initialise with a fixed, non-revealing message."""
        super().__init__("Invalid signature")


class InvalidInputError(Exception):
    """Raised when a delivery cannot be parsed; answered with HTTP 400.

    ``reason`` is returned to the caller, so it must not echo the body.
    ``field`` names the offending part of the request, when known.
    """

    def __init__(self, reason: str, *, field: str | None = None) -> None:
        """Record the reason and the offending field."""
        self.reason = reason
        self.field = field
        message = f"{field}: {reason}" if field is not None else reason
        super().__init__(message)


async def handle_authentication_error(
    _req: Request,
    resp: Response,
    ex: WebhookAuthenticationError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``WebhookAuthenticationError`` to an HTTP 401 JSON response."""
    resp.status = falcon.HTTP_401
    resp.media = {"title": str(ex)}


async def handle_invalid_input(
    _req: Request,
    resp: Response,
    ex: InvalidInputError,
    _params: dict[str, typ.Any],
) -> None:
    """Answer ``InvalidInputError`` with HTTP 400 and the failing field."""
    resp.status = falcon.HTTP_400
    media: dict[str, str] = {
        "title": "Invalid input",
        "description": ex.reason,
    }
    if ex.field is not None:
        media["field"] = ex.field
    resp.media = media


async def handle_unexpected_error(
    req: Request,
    resp: Response,
    ex: Exception,
    _params: dict[str, typ.Any],
) -> None:
    """Log an unhandled exception and answer with a generic HTTP 500.

    The exception text is logged but never returned to the caller, since it
    may contain upstream detail.
    """
    log_exception(logger, f"Unhandled error on {req.method} {req.path}", ex)
    resp.status = falcon.HTTP_500
    resp.media = {"title": "Internal error"}
