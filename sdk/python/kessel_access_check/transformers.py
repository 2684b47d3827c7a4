"""Map raw service responses onto caller-facing results."""

from __future__ import annotations

from typing import Any, Optional, Sequence

from .exceptions import ApiError
from .types.access import BulkCheckItem, CheckResultItem, ConsistencyToken, Resource
from .types.wire import (
    ApiErrorResponse,
    CheckSelfBulkResponse,
    CheckSelfResponse,
    WireConsistencyToken,
)

ALLOWED_TRUE = "ALLOWED_TRUE"
ALLOWED_FALSE = "ALLOWED_FALSE"
ALLOWED_UNSPECIFIED = "ALLOWED_UNSPECIFIED"


def map_allowed(allowed: Any) -> bool:
    """Collapse the tri-state ``allowed`` value. Only ALLOWED_TRUE grants access."""
    return allowed == ALLOWED_TRUE


def transform_token(token: Optional[WireConsistencyToken]) -> Optional[ConsistencyToken]:
    if token is None:
        return None
    return ConsistencyToken(token=token.token)


def transform_error(error: ApiErrorResponse) -> ApiError:
    return ApiError(error.code, error.message, error.details or [])


def transform_single_response(response: CheckSelfResponse, resource: Resource) -> CheckResultItem:
    return CheckResultItem(allowed=map_allowed(response.allowed), resource=resource)


def transform_bulk_response(
    response: CheckSelfBulkResponse,
    originals: Sequence[BulkCheckItem],
) -> list[CheckResultItem]:
    """Pair each response entry with the request entry at the same position.

    The service only echoes resource id and type, so extra resource
    attributes come from ``originals``.
    """
    results: list[CheckResultItem] = []
    for pair, original in zip(response.pairs, originals):
        if pair.error is not None:
            # An entry that failed never grants access, whatever "item" says.
            result = CheckResultItem(
                allowed=False,
                resource=original.resource,
                relation=original.relation,
                error=transform_error(pair.error),
            )
        else:
            result = CheckResultItem(
                allowed=map_allowed(pair.item.allowed) if pair.item is not None else False,
                resource=original.resource,
                relation=original.relation,
            )
        results.append(result)
    return results
