"""Tenant-name derivation from user email addresses."""

from __future__ import annotations

import typing as typ

__all__ = ["derive_tenant_name", "email_domain", "target_tenant_name"]

_MIN_EMAIL_PARTS = 2


def email_domain(email: str | None) -> str | None:
    """Return the lowercased domain of ``email``, or ``None`` if unusable.

    An email is usable when it has a non-empty local part and a domain whose
    first label is non-empty.

    Examples
    --------
    >>> email_domain("alice@Acme.io")
    'acme.io'
    >>> email_domain("alice@") is None
    True

    """
    if not email:
        return None
    parts = email.split("@")
    if len(parts) < _MIN_EMAIL_PARTS or not parts[0]:
        return None
    domain = parts[1].strip().lower()
    if not domain.split(".", 1)[0]:
        return None
    return domain


def derive_tenant_name(email: str) -> str:
    """Derive a tenant name from the first label of the email domain.

    Raises
    ------
    ValueError
        If ``email`` has no usable domain.

    Examples
    --------
    >>> derive_tenant_name("alice@Acme.io")
    'Acme'
    >>> derive_tenant_name("x@a.b.c")
    'A'

    """
    domain = email_domain(email)
    if domain is None:
        msg = f"cannot derive a tenant name from {email!r}"
        raise ValueError(msg)
    label = domain.split(".", 1)[0]
    return label[:1].upper() + label[1:]


def target_tenant_name(
    email: str,
    *,
    declared_name: str | None = None,
    overrides: typ.Mapping[str, str] | None = None,
) -> str:
    """Choose the tenant name for a user.

    A declared name always wins, then a domain override, then derivation.

    Parameters
    ----------
    email : str
        The user's email address.
    declared_name : str | None, optional
        Name set upstream in the user's metadata.
    overrides : Mapping[str, str] | None, optional
        Fixed tenant names keyed by lowercased email domain.

    Returns
    -------
    str
        The tenant name to resolve.

    Raises
    ------
    ValueError
        If no name is declared or mapped and ``email`` has no usable domain.

    """
    if declared_name:
        return declared_name
    domain = email_domain(email)
    if overrides and domain is not None and domain in overrides:
        return overrides[domain]
    return derive_tenant_name(email)
