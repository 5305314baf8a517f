"""Application factory for the Tenantry Falcon ASGI application.

Usage
-----
Create an app that reads its settings from the environment::

    app = create_app()

Inject collaborators for tests::

    deps = AppDependencies(
        settings_loader=lambda: WebhookSettings(webhook_secret="s3cret"),
        http_client=httpx.AsyncClient(transport=transport),
    )
    app = create_app(deps)

"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc

import falcon.asgi
import httpx

from tenantry.api.errors import (
    InvalidInputError,
    WebhookAuthenticationError,
    handle_authentication_error,
    handle_invalid_input,
    handle_unexpected_error,
)
from tenantry.api.health.resources import HealthResource, ReadyResource
from tenantry.api.middleware import HttpClientLifespan
from tenantry.api.webhooks.resources import WebhookResource
from tenantry.identity.credentials import CredentialCache
from tenantry.reconciliation.config import WebhookSettings
from tenantry.reconciliation.service import ReconciliationService

__all__ = ["WEBHOOK_ROUTE", "AppDependencies", "create_app"]

WEBHOOK_ROUTE = "/webhooks/identity"


@dc.dataclass(frozen=True, slots=True)
class AppDependencies:
    """Collaborators for the Falcon ASGI application.

    Attributes
    ----------
    settings_loader
        Returns the settings in force; called on every request.
    http_client
        Shared outbound HTTP client. When ``None`` the factory creates one
        and closes it at ASGI shutdown.
    credentials
        Vendor token cache. When ``None`` the factory creates one bound to
        the shared HTTP client.

    """

    settings_loader: cabc.Callable[[], WebhookSettings] = WebhookSettings.from_env
    http_client: httpx.AsyncClient | None = None
    credentials: CredentialCache | None = None


def create_app(
    dependencies: AppDependencies | None = None,
) -> falcon.asgi.App:
    """Create and configure the Falcon ASGI application.

    Registers ``/health``, ``/ready`` and ``POST /webhooks/identity``.

    Parameters
    ----------
    dependencies
        Optional collaborators; defaults read everything from the
        environment.

    Returns
    -------
    falcon.asgi.App
        Configured Falcon ASGI application.

    """
    deps = dependencies or AppDependencies()
    middleware: list[object] = []

    http_client = deps.http_client
    if http_client is None:
        http_client = httpx.AsyncClient()
        middleware.append(HttpClientLifespan(http_client))

    credentials = deps.credentials or CredentialCache(http_client)
    service = ReconciliationService(credentials=credentials, http_client=http_client)

    app = falcon.asgi.App(middleware=middleware)  # type: ignore[no-matching-overload]  # Falcon stubs

    app.add_route("/health", HealthResource())
    app.add_route("/ready", ReadyResource(deps.settings_loader))
    app.add_route(WEBHOOK_ROUTE, WebhookResource(service, deps.settings_loader))

    # Handlers resolve by exception MRO; the Exception fallback shadows nothing.
    app.add_error_handler(Exception, handle_unexpected_error)
    app.add_error_handler(WebhookAuthenticationError, handle_authentication_error)
    app.add_error_handler(InvalidInputError, handle_invalid_input)

    return app
