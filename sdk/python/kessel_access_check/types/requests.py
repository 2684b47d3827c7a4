from __future__ import annotations

from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict

from .access import BulkCheckItem, ConsistencyOptions, Resource, ResourceWithRelation


class SingleCheck(BaseModel):
    """One resource, one relation."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["single"] = "single"
    resource: Resource
    relation: str


class BulkSameRelation(BaseModel):
    """Many resources checked against one relation."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["bulk"] = "bulk"
    resources: list[Resource]
    relation: str
    consistency: Optional[ConsistencyOptions] = None

    def bulk_items(self) -> list[BulkCheckItem]:
        return [BulkCheckItem(resource=resource, relation=self.relation) for resource in self.resources]


class BulkPerItemRelation(BaseModel):
    """Many resources, each carrying the relation to check."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["bulk_nested"] = "bulk_nested"
    resources: list[ResourceWithRelation]
    consistency: Optional[ConsistencyOptions] = None

    def bulk_items(self) -> list[BulkCheckItem]:
        return [BulkCheckItem(resource=resource, relation=resource.relation) for resource in self.resources]


CheckRequest = Union[SingleCheck, BulkSameRelation, BulkPerItemRelation]
BulkCheckRequest = Union[BulkSameRelation, BulkPerItemRelation]
