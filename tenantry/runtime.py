"""Tenantry runtime entrypoint for container deployments.

This module keeps the ``tenantry.runtime:create_app`` Granian entrypoint
stable and delegates application construction to
:func:`tenantry.api.app.create_app`. Webhook settings are read per request,
so the app starts even when platform credentials are not yet configured;
``/ready`` reports what is missing.

Configuration is driven by environment variables:

- ``TENANTRY_HOST``: Bind address (default ``0.0.0.0``)
- ``TENANTRY_PORT``: Listen port (default ``8080``)
- ``TENANTRY_LOG_LEVEL``: Log level (default ``INFO``)

Run the service directly with ``python -m tenantry.runtime``.
"""

from __future__ import annotations

import os
import typing as typ

from tenantry.logging import (
    configure_logging,
    get_logger,
    log_error,
    log_info,
    log_warning,
)
from tenantry.reconciliation.config import env_flag

if typ.TYPE_CHECKING:
    import falcon.asgi

__all__ = ["create_app", "main"]

logger = get_logger(__name__)

_PORT_RANGE = range(1, 65536)


def _parse_port(raw: str) -> int:
    """Return ``raw`` as a TCP port, exiting the process if it is not one."""
    try:
        port = int(raw)
    except ValueError:
        port = None
    if port is None or port not in _PORT_RANGE:
        log_error(
            logger,
            "Invalid TENANTRY_PORT value: %r (must be %d-%d)",
            raw,
            _PORT_RANGE.start,
            _PORT_RANGE.stop - 1,
        )
        raise SystemExit(1)
    return port


def create_app() -> falcon.asgi.App:
    """Create the Falcon ASGI application with environment-backed settings."""
    from tenantry.api.app import create_app as _create_api_app

    return _create_api_app()


def main() -> None:
    """Start the Tenantry runtime server using Granian.

    Reads ``TENANTRY_HOST``, ``TENANTRY_PORT`` and ``TENANTRY_LOG_LEVEL``
    from the environment and starts the ASGI server.
    """
    from granian import Granian
    from granian.constants import Interfaces

    requested_level = os.environ.get("TENANTRY_LOG_LEVEL", "INFO")
    level, replaced = configure_logging(requested_level)
    if replaced:
        log_warning(
            logger,
            "Invalid TENANTRY_LOG_LEVEL %r, falling back to %s",
            requested_level,
            level,
        )

    host = os.environ.get("TENANTRY_HOST", "0.0.0.0")  # noqa: S104 - containers bind all interfaces
    port = _parse_port(os.environ.get("TENANTRY_PORT", "8080"))

    if env_flag("TENANTRY_DRY_RUN"):
        log_warning(logger, "TENANTRY_DRY_RUN is set; no platform calls will be made")

    log_info(
        logger,
        "Starting Tenantry runtime on %s:%d (log_level=%s)",
        host,
        port,
        level,
    )

    server = Granian(
        "tenantry.runtime:create_app",
        address=host,
        port=port,
        interface=Interfaces.ASGI,
        factory=True,
    )
    server.serve()


if __name__ == "__main__":
    main()
