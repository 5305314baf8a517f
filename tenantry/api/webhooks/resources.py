"""Webhook gateway for identity platform lifecycle events.

``POST /webhooks/identity`` authenticates the caller, reads and parses the
body once, runs the reconciliation pipeline and maps its outcome onto an
HTTP status:

==============================================  ======
Condition                                       Status
==============================================  ======
Missing or invalid signature                    401
Body is not valid JSON                          400
Event not actionable, or foreign invitation     204
Actionable event without a usable email         200
Dry run                                         200
Reconciliation applied                          200
Missing configuration or platform failure       500
==============================================  ======

"""

from __future__ import annotations

import typing as typ

import falcon
import msgspec

from tenantry.api.errors import InvalidInputError, WebhookAuthenticationError
from tenantry.reconciliation.observability import ErrorCategory
from tenantry.reconciliation.outcome import OutcomeKind
from tenantry.webhooks.signature import SIGNATURE_HEADER, verify_webhook_signature

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from falcon.asgi import Request, Response

    from tenantry.reconciliation.config import WebhookSettings
    from tenantry.reconciliation.outcome import ReconciliationOutcome
    from tenantry.reconciliation.service import ReconciliationService

__all__ = ["WebhookResource"]


def _render_outcome(outcome: ReconciliationOutcome, resp: Response) -> None:
    """Set status and body on ``resp`` for ``outcome``."""
    match outcome.kind:
        case OutcomeKind.IGNORED:
            resp.status = falcon.HTTP_204
        case OutcomeKind.ACKNOWLEDGED:
            resp.status = falcon.HTTP_200
            resp.media = {
                "status": "dry_run" if outcome.dry_run else "acknowledged",
                "reason": outcome.reason,
                "tenant_name": outcome.tenant_name,
            }
        case OutcomeKind.APPLIED:
            tenant = outcome.tenant
            resp.status = falcon.HTTP_200
            resp.media = {
                "status": "applied",
                "tenant_id": tenant.tenant_id if tenant is not None else None,
                "tenant_name": outcome.tenant_name,
            }
        case OutcomeKind.FAILED:
            title = (
                "Configuration error"
                if outcome.category is ErrorCategory.CONFIGURATION
                else "Reconciliation failed"
            )
            resp.status = falcon.HTTP_500
            resp.media = {"title": title, "description": outcome.reason}


class WebhookResource:
    """Entry point for lifecycle event deliveries.

    Parameters
    ----------
    service
        Reconciliation pipeline shared across requests.
    settings_loader
        Callable returning the settings in force for each request.

    """

    def __init__(
        self,
        service: ReconciliationService,
        settings_loader: cabc.Callable[[], WebhookSettings],
    ) -> None:
        """Configure the resource with its collaborators."""
        self._service = service
        self._settings_loader = settings_loader

    async def on_post(self, req: Request, resp: Response) -> None:
        """Handle one webhook delivery.

        Raises
        ------
        WebhookAuthenticationError
            If the signature header is missing or wrong; the body is not
            read.
        InvalidInputError
            If the body is not valid JSON.

        """
        settings = self._settings_loader()
        if not verify_webhook_signature(
            req.get_header(SIGNATURE_HEADER), settings.webhook_secret
        ):
            raise WebhookAuthenticationError

        raw = await req.stream.read()
        try:
            payload = msgspec.json.decode(raw)
        except msgspec.DecodeError as exc:
            msg = "request body is not valid JSON"
            raise InvalidInputError(msg, field="body") from exc

        outcome = await self._service.handle(payload, settings)
        _render_outcome(outcome, resp)
