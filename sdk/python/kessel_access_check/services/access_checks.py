from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Sequence

from ..types.access import BulkCheckItem, ConsistencyOptions, Resource
from ..types.wire import (
    CheckRequestItem,
    CheckSelfBulkRequest,
    CheckSelfBulkResponse,
    CheckSelfResponse,
    WireConsistency,
    WireConsistencyToken,
    WireObject,
    WireReporter,
)

if TYPE_CHECKING:
    from .._http import HttpClient
    from ..cancellation import CancellationToken
    from ..config import AccessCheckConfig


def build_check_item(resource: Resource, relation: str) -> CheckRequestItem:
    return CheckRequestItem(
        object=WireObject(
            resource_id=resource.id,
            resource_type=resource.type,
            reporter=WireReporter(
                type=resource.reporter.type,
                instance_id=resource.reporter.instance_id,
            ),
        ),
        relation=relation,
    )


def build_consistency(options: Optional[ConsistencyOptions]) -> Optional[WireConsistency]:
    if options is None:
        return None
    fresh = options.at_least_as_fresh
    return WireConsistency(
        minimize_latency=options.minimize_latency,
        at_least_as_fresh=WireConsistencyToken(token=fresh.token) if fresh is not None else None,
    )


def build_bulk_request(
    items: Sequence[BulkCheckItem],
    consistency: Optional[ConsistencyOptions] = None,
) -> CheckSelfBulkRequest:
    return CheckSelfBulkRequest(
        items=[build_check_item(item.resource, item.relation) for item in items],
        consistency=build_consistency(consistency),
    )


class AccessChecksService:
    """Raw calls to the self access check endpoints."""

    def __init__(self, http: HttpClient, config: AccessCheckConfig) -> None:
        self._http = http
        self._config = config

    @property
    def config(self) -> AccessCheckConfig:
        return self._config

    async def check_self(
        self,
        resource: Resource,
        relation: str,
        cancel_token: Optional[CancellationToken] = None,
    ) -> CheckSelfResponse:
        return await self._http.post(
            self._config.endpoint("checkself"),
            json=build_check_item(resource, relation).to_wire(),
            response_model=CheckSelfResponse,
            cancel_token=cancel_token,
        )

    async def check_self_bulk(
        self,
        items: Sequence[BulkCheckItem],
        consistency: Optional[ConsistencyOptions] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> CheckSelfBulkResponse:
        return await self._http.post(
            self._config.endpoint("checkselfbulk"),
            json=build_bulk_request(items, consistency).to_wire(),
            response_model=CheckSelfBulkResponse,
            context={"expected_pairs": len(items)},
            cancel_token=cancel_token,
        )
