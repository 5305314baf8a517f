"""Identity platform client, credentials and response models."""

from __future__ import annotations

from .client import IdentityPlatformClient, OperationPolicy
from .config import IdentityPlatformConfig
from .credentials import CredentialCache, VendorSession
from .errors import (
    IdentityAPIError,
    IdentityConfigError,
    IdentityPlatformError,
    IdentityResponseShapeError,
)
from .models import Tenant, UserPage

__all__ = [
    "CredentialCache",
    "IdentityAPIError",
    "IdentityConfigError",
    "IdentityPlatformClient",
    "IdentityPlatformConfig",
    "IdentityPlatformError",
    "IdentityResponseShapeError",
    "OperationPolicy",
    "Tenant",
    "UserPage",
    "VendorSession",
]
