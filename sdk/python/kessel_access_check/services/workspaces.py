from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

import httpx

from .._http import HttpClient
from ..exceptions import NotFoundError
from ..types.workspaces import Workspace, WorkspaceListResponse

if TYPE_CHECKING:
    from ..cancellation import CancellationToken

logger = logging.getLogger(__name__)

WORKSPACE_API_PATH = "/api/rbac/v2/workspaces/"


class WorkspacesService:
    """Looks up the organization's root or default workspace in RBAC."""

    def __init__(self, http: HttpClient, rbac_base_url: str) -> None:
        self._http = http
        self._rbac_base_url = rbac_base_url.rstrip("/")

    async def fetch_by_type(
        self,
        workspace_type: str,
        headers: Optional[dict[str, str]] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> Workspace:
        resp: WorkspaceListResponse = await self._http.get(
            f"{self._rbac_base_url}{WORKSPACE_API_PATH}",
            params={"type": workspace_type},
            headers=headers,
            response_model=WorkspaceListResponse,
            cancel_token=cancel_token,
        )
        if not resp.data:
            raise NotFoundError(f"No {workspace_type} workspace found in response")
        if len(resp.data) > 1:
            logger.debug("RBAC returned %d %s workspaces, using the first", len(resp.data), workspace_type)
        return resp.data[0]

    async def fetch_root(
        self,
        headers: Optional[dict[str, str]] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> Workspace:
        return await self.fetch_by_type("root", headers=headers, cancel_token=cancel_token)

    async def fetch_default(
        self,
        headers: Optional[dict[str, str]] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> Workspace:
        return await self.fetch_by_type("default", headers=headers, cancel_token=cancel_token)


async def _fetch_workspace(
    rbac_base_url: str,
    workspace_type: str,
    headers: Optional[dict[str, str]],
    client: Optional[httpx.AsyncClient],
) -> Workspace:
    http = HttpClient(client)
    try:
        return await WorkspacesService(http, rbac_base_url).fetch_by_type(workspace_type, headers=headers)
    finally:
        await http.close()


async def fetch_root_workspace(
    rbac_base_url: str,
    headers: Optional[dict[str, str]] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> Workspace:
    """Fetch the root workspace of the current organization.

    ``headers`` are merged into the request (e.g. an ``Authorization``
    bearer header); without them the session cookies of ``client`` are used.
    """
    return await _fetch_workspace(rbac_base_url, "root", headers, client)


async def fetch_default_workspace(
    rbac_base_url: str,
    headers: Optional[dict[str, str]] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> Workspace:
    """Fetch the default workspace of the current organization."""
    return await _fetch_workspace(rbac_base_url, "default", headers, client)
