"""Webhook authentication.

The platform sends the configured secret in ``x-webhook-secret``. Two
forms are accepted: the secret itself (pre-shared key), or a JWT signed
with the secret as its HS256 key (signed assertion). The cheap equality
check runs first.
"""

from __future__ import annotations

import hmac

import jwt

__all__ = ["SIGNATURE_HEADER", "verify_webhook_signature"]

SIGNATURE_HEADER = "x-webhook-secret"

_SIGNING_ALGORITHMS = ["HS256"]


def _is_signed_assertion(token: str, secret: str) -> bool:
    try:
        jwt.decode(
            token,
            secret,
            algorithms=_SIGNING_ALGORITHMS,
            options={"verify_aud": False},
        )
    except jwt.PyJWTError:
        return False
    return True


def verify_webhook_signature(header_value: str | None, secret: str | None) -> bool:
    """Return True when ``header_value`` proves knowledge of ``secret``.

    A missing header or a missing configured secret always fails.

    Examples
    --------
    >>> verify_webhook_signature("s3cret", "s3cret")
    True
    >>> verify_webhook_signature("s3cret", "")
    False

    """
    if not header_value or not secret:
        return False
    if hmac.compare_digest(header_value.encode(), secret.encode()):
        return True
    return _is_signed_assertion(header_value, secret)
