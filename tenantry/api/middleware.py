"""ASGI lifespan middleware for the shared outbound HTTP client.

Usage
-----
Register the middleware when creating the Falcon app::

    http_client = httpx.AsyncClient()
    app = falcon.asgi.App(middleware=[HttpClientLifespan(http_client)])

"""

from __future__ import annotations

import typing as typ

from tenantry.logging import get_logger, log_info

if typ.TYPE_CHECKING:
    import httpx

__all__ = ["HttpClientLifespan"]

logger = get_logger(__name__)


class HttpClientLifespan:
    """Close the process-wide ``httpx.AsyncClient`` at ASGI shutdown.

    Only clients created by the app factory are registered here; clients
    injected by callers remain the caller's responsibility.

    Parameters
    ----------
    http_client
        Client shared by every request in the process.

    """

    def __init__(self, http_client: httpx.AsyncClient) -> None:
        """Initialise the middleware with the client it manages."""
        self._http_client = http_client

    async def process_shutdown(
        self,
        _scope: dict[str, typ.Any],
        _event: dict[str, typ.Any],
    ) -> None:
        """Close the client when the server stops."""
        if not self._http_client.is_closed:
            await self._http_client.aclose()
            log_info(logger, "Closed shared identity platform HTTP client")
