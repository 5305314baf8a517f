"""Inbound webhook authentication."""

from __future__ import annotations

from .signature import SIGNATURE_HEADER, verify_webhook_signature

__all__ = ["SIGNATURE_HEADER", "verify_webhook_signature"]
