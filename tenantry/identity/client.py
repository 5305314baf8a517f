"""Identity platform management API client.

Every outbound call is described by an :class:`OperationPolicy` that names
the operation and lists the non-2xx statuses that still mean the desired
end state holds. Nothing is retried: the first response outside a policy
raises :class:`~tenantry.identity.errors.IdentityAPIError`.
"""

from __future__ import annotations

import dataclasses
import typing as typ

import httpx
import msgspec

from tenantry.identity.errors import IdentityAPIError, IdentityResponseShapeError
from tenantry.identity.models import Tenant, UserPage, tenant_from_item

if typ.TYPE_CHECKING:
    from tenantry.identity.config import IdentityPlatformConfig
    from tenantry.identity.credentials import CredentialCache

__all__ = [
    "ADD_USER_TO_TENANT",
    "ASSIGN_APPLICATION",
    "BULK_INVITE",
    "CREATE_TENANT",
    "DISABLE_USER_IN_TENANT",
    "LIST_TENANTS",
    "LIST_TENANT_USERS",
    "REMOVE_USER_FROM_TENANT",
    "TENANT_HEADER",
    "IdentityPlatformClient",
    "OperationPolicy",
]

TENANT_HEADER = "frontegg-tenant-id"

_HTTP_CONFLICT = 409
_HTTP_NOT_FOUND = 404


@dataclasses.dataclass(frozen=True, slots=True)
class OperationPolicy:
    """Name and idempotent-success statuses for one outbound operation."""

    name: str
    idempotent_statuses: frozenset[int] = frozenset()

    def accepts(self, status_code: int) -> bool:
        """Return True for 2xx and for whitelisted idempotent statuses."""
        return (
            httpx.codes.is_success(status_code)
            or status_code in self.idempotent_statuses
        )

    def is_idempotent_hit(self, status_code: int) -> bool:
        """Return True when the response means "already in that state"."""
        return status_code in self.idempotent_statuses


LIST_TENANTS = OperationPolicy("Get tenants")
CREATE_TENANT = OperationPolicy("Create tenant")
# Already assigned.
ASSIGN_APPLICATION = OperationPolicy(
    "Assign application to tenant", frozenset({_HTTP_CONFLICT})
)
# Already a member.
ADD_USER_TO_TENANT = OperationPolicy(
    "Add user to tenant", frozenset({_HTTP_CONFLICT})
)
BULK_INVITE = OperationPolicy("Bulk invite")
# Not a member of that tenant.
REMOVE_USER_FROM_TENANT = OperationPolicy(
    "Remove user from tenant", frozenset({_HTTP_NOT_FOUND})
)
LIST_TENANT_USERS = OperationPolicy("List tenant users")
DISABLE_USER_IN_TENANT = OperationPolicy("Disable user in tenant")


def _json_body(response: httpx.Response, policy: OperationPolicy) -> object:
    try:
        return response.json()
    except ValueError as exc:
        raise IdentityResponseShapeError.missing(policy.name, "body") from exc


class IdentityPlatformClient:
    """Thin async wrapper over the platform's vendor-authenticated API.

    Parameters
    ----------
    config
        Base URL and vendor credentials.
    credentials
        Shared vendor token cache.
    http_client
        Optional shared ``httpx.AsyncClient``. When omitted the instance
        creates and owns one.

    """

    def __init__(
        self,
        config: IdentityPlatformConfig,
        *,
        credentials: CredentialCache,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialise the client with configuration and a token cache."""
        self._config = config
        self._credentials = credentials
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=config.timeout_s,
            headers={"Accept": "application/json"},
        )

    @property
    def config(self) -> IdentityPlatformConfig:
        """Read-only access to the client configuration."""
        return self._config

    async def aclose(self) -> None:
        """Close any owned HTTP resources."""
        if self._owns_client:
            await self._client.aclose()

    async def _request(  # noqa: PLR0913
        self,
        policy: OperationPolicy,
        method: str,
        path: str,
        *,
        json: object | None = None,
        params: dict[str, str] | None = None,
        tenant_id: str | None = None,
    ) -> httpx.Response:
        """Send one authenticated request and enforce ``policy``."""
        token = await self._credentials.acquire(self._config)
        headers = {"Authorization": f"Bearer {token}"}
        if tenant_id is not None:
            headers[TENANT_HEADER] = tenant_id

        try:
            response = await self._client.request(
                method,
                self._config.url(path),
                json=json,
                params=params,
                headers=headers,
                timeout=self._config.timeout_s,
            )
        except httpx.TimeoutException as exc:
            raise IdentityAPIError.timeout(policy.name) from exc
        except httpx.RequestError as exc:
            raise IdentityAPIError.network_error(policy.name, exc) from exc

        if not policy.accepts(response.status_code):
            raise IdentityAPIError.http_error(policy.name, response.status_code)
        return response

    async def find_tenants(self, name_filter: str, *, limit: int = 1) -> list[Tenant]:
        """Return tenants matching a free-text filter.

        Both a bare JSON array and an ``{"items": [...]}`` wrapper are
        accepted. Entries without an identifier are skipped.

        Parameters
        ----------
        name_filter : str
            Free-text filter; the platform matches it loosely, not exactly.
        limit : int, default 1
            Maximum number of tenants to request.

        Returns
        -------
        list[Tenant]
            Matching tenants in the order the platform returned them.

        Raises
        ------
        IdentityAPIError
            If the request fails or answers with a non-success status.

        """
        response = await self._request(
            LIST_TENANTS,
            "GET",
            "tenants/resources/tenants/v2",
            params={"_filter": name_filter, "_limit": str(limit)},
        )
        body = _json_body(response, LIST_TENANTS)
        items = body.get("items") if isinstance(body, dict) else body
        if not isinstance(items, list):
            return []
        return [tenant for tenant in map(tenant_from_item, items) if tenant is not None]

    async def create_tenant(self, name: str) -> Tenant:
        """Create a tenant named ``name`` and return it.

        Parameters
        ----------
        name : str
            Display name of the new tenant.

        Returns
        -------
        Tenant
            The created tenant. ``name`` is filled in when the response
            omits it.

        Raises
        ------
        IdentityResponseShapeError
            If the response carries no tenant identifier.

        """
        response = await self._request(
            CREATE_TENANT,
            "POST",
            "tenants/resources/tenants/v1",
            json={"name": name},
        )
        tenant = tenant_from_item(_json_body(response, CREATE_TENANT))
        if tenant is None:
            raise IdentityResponseShapeError.missing(CREATE_TENANT.name, "tenantId")
        if not tenant.name:
            tenant = Tenant(tenant_id=tenant.tenant_id, name=name)
        return tenant

    async def assign_application(self, app_id: str, tenant_id: str) -> bool:
        """Assign an application to a tenant.

        Parameters
        ----------
        app_id : str
            Application identifier.
        tenant_id : str
            Tenant receiving the application.

        Returns
        -------
        bool
            ``False`` when the application was already assigned.

        """
        response = await self._request(
            ASSIGN_APPLICATION,
            "POST",
            f"applications/resources/applications/tenant-assignments/v1/{app_id}",
            json={"tenantId": tenant_id},
        )
        return not ASSIGN_APPLICATION.is_idempotent_hit(response.status_code)

    async def add_user_to_tenant(self, user_id: str, tenant_id: str) -> bool:
        """Attach an existing user to a tenant by identifier.

        Parameters
        ----------
        user_id : str
            Platform identifier of the user.
        tenant_id : str
            Tenant to join.

        Returns
        -------
        bool
            ``False`` when the user was already a member.

        """
        response = await self._request(
            ADD_USER_TO_TENANT,
            "POST",
            f"identity/resources/users/v1/{user_id}/tenant",
            json={"tenantId": tenant_id, "skipInviteEmail": True},
        )
        return not ADD_USER_TO_TENANT.is_idempotent_hit(response.status_code)

    async def invite_user_by_email(
        self,
        tenant_id: str,
        email: str,
        *,
        name: str | None = None,
    ) -> None:
        """Add a user to a tenant by email, provisioning them if absent.

        The invitation is silent and pre-verified, so no email is sent.

        Parameters
        ----------
        tenant_id : str
            Tenant to invite into.
        email : str
            Address identifying the user.
        name : str | None, optional
            Display name recorded for a newly provisioned user.

        """
        user: dict[str, object] = {
            "email": email,
            "provider": "local",
            "skipInviteEmail": True,
            "verified": True,
        }
        if name:
            user["name"] = name
        await self._request(
            BULK_INVITE,
            "POST",
            f"identity/resources/tenants/invites/v1/bulk/{tenant_id}",
            json={"users": [user]},
        )

    async def remove_user_from_tenant(self, user_id: str, tenant_id: str) -> bool:
        """Remove a user from the tenant named in the tenant-context header.

        Parameters
        ----------
        user_id : str
            Platform identifier of the user.
        tenant_id : str
            Tenant to leave; sent as the tenant-context header.

        Returns
        -------
        bool
            ``False`` when the user was not a member.

        """
        response = await self._request(
            REMOVE_USER_FROM_TENANT,
            "DELETE",
            f"identity/resources/users/v1/{user_id}",
            tenant_id=tenant_id,
        )
        return not REMOVE_USER_FROM_TENANT.is_idempotent_hit(response.status_code)

    async def list_tenant_users(self, tenant_id: str, *, limit: int) -> UserPage:
        """Return the first page of a tenant's users, at most ``limit`` long.

        Parameters
        ----------
        tenant_id : str
            Tenant whose users are listed.
        limit : int
            Page size.

        Returns
        -------
        UserPage
            The page; a bare JSON array is wrapped as its ``items``.

        Raises
        ------
        IdentityResponseShapeError
            If the body is neither a list nor an object with ``items``.

        """
        response = await self._request(
            LIST_TENANT_USERS,
            "GET",
            "identity/resources/users/v3",
            params={"_limit": str(limit), "_offset": "0"},
            tenant_id=tenant_id,
        )
        body = _json_body(response, LIST_TENANT_USERS)
        if isinstance(body, list):
            return UserPage(items=body)
        try:
            return msgspec.convert(body, type=UserPage)
        except msgspec.ValidationError as exc:
            raise IdentityResponseShapeError.missing(
                LIST_TENANT_USERS.name, "items"
            ) from exc

    async def disable_user_in_tenant(self, user_id: str, tenant_id: str) -> None:
        """Disable a user within one tenant."""
        await self._request(
            DISABLE_USER_IN_TENANT,
            "POST",
            f"identity/resources/tenants/users/v1/{user_id}/disable",
            tenant_id=tenant_id,
        )
