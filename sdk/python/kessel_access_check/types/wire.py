from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, model_validator

# Wire models use the service's camelCase field names through aliases.


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class WireReporter(_WireModel):
    type: str
    instance_id: Optional[str] = Field(default=None, alias="instanceId")


class WireObject(_WireModel):
    resource_id: str = Field(alias="resourceId")
    resource_type: str = Field(alias="resourceType")
    reporter: WireReporter


class CheckRequestItem(_WireModel):
    object: WireObject
    relation: str


class WireConsistencyToken(_WireModel):
    token: str


class WireConsistency(_WireModel):
    minimize_latency: Optional[bool] = Field(default=None, alias="minimizeLatency")
    at_least_as_fresh: Optional[WireConsistencyToken] = Field(default=None, alias="atLeastAsFresh")


class CheckSelfBulkRequest(_WireModel):
    items: list[CheckRequestItem]
    consistency: Optional[WireConsistency] = None


class ApiErrorResponse(_WireModel):
    code: int
    message: str = ""
    details: Optional[list[Any]] = None


class CheckSelfResponse(_WireModel):
    # Left untyped so unknown values reach the fail-closed mapping.
    allowed: Any = None
    consistency_token: Optional[WireConsistencyToken] = Field(default=None, alias="consistencyToken")


class CheckSelfBulkResponseItem(_WireModel):
    allowed: Any = None


class CheckSelfBulkResponsePair(_WireModel):
    request: Optional[dict[str, Any]] = None
    item: Optional[CheckSelfBulkResponseItem] = None
    error: Optional[ApiErrorResponse] = None


class CheckSelfBulkResponse(_WireModel):
    pairs: list[CheckSelfBulkResponsePair]
    consistency_token: Optional[WireConsistencyToken] = Field(default=None, alias="consistencyToken")

    @model_validator(mode="after")
    def _check_pair_count(self, info: ValidationInfo) -> CheckSelfBulkResponse:
        expected = (info.context or {}).get("expected_pairs")
        if expected is not None and len(self.pairs) != expected:
            raise ValueError(f"expected {expected} pairs, got {len(self.pairs)}")
        return self
