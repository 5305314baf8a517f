"""Liveness and readiness probes.

``/health`` only proves the process is serving. ``/ready`` additionally
checks that the webhook can authenticate callers and reach the platform
with the current environment, so a misconfigured pod is kept out of
rotation instead of answering every delivery with 401 or 500.

Usage
-----
Register the probes on the Falcon app::

    app.add_route("/health", HealthResource())
    app.add_route("/ready", ReadyResource(WebhookSettings.from_env))

"""

from __future__ import annotations

import typing as typ
from http import HTTPStatus

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from falcon.asgi import Request, Response

    from tenantry.reconciliation.config import WebhookSettings

__all__ = ["HealthResource", "ReadyResource"]


class HealthResource:
    """Liveness probe resource returning ``{"status": "ok"}``."""

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Handle GET /health requests."""
        resp.media = {"status": "ok"}
        resp.status = HTTPStatus.OK


class ReadyResource:
    """Readiness probe driven by the current webhook settings.

    Parameters
    ----------
    settings_loader
        Callable returning the settings in force, read on every probe.

    """

    def __init__(self, settings_loader: cabc.Callable[[], WebhookSettings]) -> None:
        """Initialise the probe with a settings loader."""
        self._settings_loader = settings_loader

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Handle GET /ready requests.

        Responds 200 ``{"status": "ready"}`` when configured, otherwise 503
        with the names of the missing or invalid variables.
        """
        try:
            settings = self._settings_loader()
        except ValueError as exc:
            resp.media = {"status": "invalid", "detail": str(exc)}
            resp.status = HTTPStatus.SERVICE_UNAVAILABLE
            return

        missing = settings.missing_for_readiness()
        if missing:
            resp.media = {"status": "unconfigured", "missing": missing}
            resp.status = HTTPStatus.SERVICE_UNAVAILABLE
            return

        resp.media = {"status": "ready"}
        resp.status = HTTPStatus.OK
