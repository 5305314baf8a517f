"""Inbound lifecycle event model and payload normalization."""

from __future__ import annotations

from .models import EventKind, InboundEvent
from .normalize import normalize_event

__all__ = ["EventKind", "InboundEvent", "normalize_event"]
