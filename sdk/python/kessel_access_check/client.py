"""Kessel access check client."""

from __future__ import annotations

from typing import Optional, Sequence, Union

import httpx

from ._http import HttpClient
from .cancellation import CancellationToken
from .config import AccessCheckConfig, get_settings
from .engine import check_bulk, check_single
from .services import AccessChecksService, WorkspacesService
from .state import AccessCheckResult, RequestObserver, ResultCoordinator
from .types.access import (
    BulkCheckOutcome,
    CheckResultItem,
    ConsistencyOptions,
    Resource,
    ResourceWithRelation,
)
from .types.requests import BulkPerItemRelation, BulkSameRelation, CheckRequest
from .types.workspaces import Workspace


class AccessCheckClient:
    """Main client for self access checks.

    Usage:
        config = AccessCheckConfig(base_url="https://console.example.com")
        async with AccessCheckClient(config, cookies={"cs_jwt": jwt}) as client:
            result = await client.check_self(resource, "view")
            if result.allowed:
                ...
    """

    def __init__(
        self,
        config: AccessCheckConfig,
        client: Optional[httpx.AsyncClient] = None,
        headers: Optional[dict[str, str]] = None,
        cookies: Optional[dict[str, str]] = None,
        rbac_base_url: Optional[str] = None,
    ) -> None:
        self._config = config
        self._http = HttpClient(client, headers=headers, cookies=cookies)
        self.access_checks = AccessChecksService(self._http, config)
        self.workspaces = WorkspacesService(self._http, rbac_base_url if rbac_base_url is not None else config.base_url)

    @classmethod
    def from_settings(cls, **kwargs: object) -> AccessCheckClient:
        """Build a client from ``KESSEL_*`` environment settings."""
        settings = get_settings()
        settings.configure_logging()
        kwargs.setdefault("rbac_base_url", settings.rbac_base_url)
        return cls(settings.to_config(), **kwargs)  # type: ignore[arg-type]

    @property
    def config(self) -> AccessCheckConfig:
        return self._config

    async def check_self(
        self,
        resource: Resource,
        relation: str,
        cancel_token: Optional[CancellationToken] = None,
    ) -> CheckResultItem:
        """Check whether the caller has ``relation`` on ``resource``."""
        return await check_single(self.access_checks, resource, relation, cancel_token=cancel_token)

    async def check_self_bulk(
        self,
        resources: Sequence[Resource],
        relation: Optional[str] = None,
        consistency: Optional[ConsistencyOptions] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> BulkCheckOutcome:
        """Check many resources.

        With ``relation`` every resource is checked against it; without it
        every resource must be a ``ResourceWithRelation``.
        """
        request = self.bulk_request(resources, relation, consistency)
        return await check_bulk(
            self.access_checks,
            request.bulk_items(),
            request.consistency,
            cancel_token=cancel_token,
        )

    @staticmethod
    def bulk_request(
        resources: Sequence[Resource],
        relation: Optional[str] = None,
        consistency: Optional[ConsistencyOptions] = None,
    ) -> Union[BulkSameRelation, BulkPerItemRelation]:
        if relation is not None:
            return BulkSameRelation(resources=list(resources), relation=relation, consistency=consistency)
        missing = [r.id for r in resources if not isinstance(r, ResourceWithRelation)]
        if missing:
            raise TypeError(f"Resources without a relation need an explicit relation: {missing}")
        return BulkPerItemRelation(resources=list(resources), consistency=consistency)

    def coordinator(
        self,
        request: CheckRequest,
        cancel_token: Optional[CancellationToken] = None,
        observer: Optional[RequestObserver] = None,
    ) -> ResultCoordinator:
        """Build a state coordinator for one invocation of ``request``."""
        return ResultCoordinator(self.access_checks, request, cancel_token=cancel_token, observer=observer)

    async def check(
        self,
        request: CheckRequest,
        cancel_token: Optional[CancellationToken] = None,
        observer: Optional[RequestObserver] = None,
    ) -> AccessCheckResult:
        """Run ``request`` and return its terminal result state."""
        return await self.coordinator(request, cancel_token=cancel_token, observer=observer).run()

    async def fetch_root_workspace(self, headers: Optional[dict[str, str]] = None) -> Workspace:
        return await self.workspaces.fetch_root(headers=headers)

    async def fetch_default_workspace(self, headers: Optional[dict[str, str]] = None) -> Workspace:
        return await self.workspaces.fetch_default(headers=headers)

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._http.close()

    async def __aenter__(self) -> AccessCheckClient:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()

    def __repr__(self) -> str:
        return f"AccessCheckClient(base_url={self._config.base_url!r}, api_path={self._config.api_path!r})"
