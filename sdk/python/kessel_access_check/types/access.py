from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict

from ..exceptions import ApiError


class ReporterReference(BaseModel):
    type: str
    instance_id: Optional[str] = None


class Resource(BaseModel):
    """A resource to check. Extra attributes ride along untouched."""

    model_config = ConfigDict(extra="allow")

    id: str
    type: str
    reporter: ReporterReference


class ResourceWithRelation(Resource):
    relation: str


class ConsistencyToken(BaseModel):
    token: str


class ConsistencyOptions(BaseModel):
    minimize_latency: Optional[bool] = None
    at_least_as_fresh: Optional[ConsistencyToken] = None


class BulkCheckItem(BaseModel):
    resource: Resource
    relation: str


class CheckResultItem(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    allowed: bool
    resource: Resource
    relation: Optional[str] = None
    error: Optional[ApiError] = None


class BulkCheckOutcome(BaseModel):
    items: list[CheckResultItem] = []
    consistency_token: Optional[ConsistencyToken] = None


class SelfAccessCheckResult(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    loading: bool = False
    data: Optional[CheckResultItem] = None
    error: Optional[ApiError] = None


class BulkSelfAccessCheckResult(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    loading: bool = False
    data: Optional[list[CheckResultItem]] = None
    error: Optional[ApiError] = None
    consistency_token: Optional[ConsistencyToken] = None
