from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel

# RBAC v2 workspace schema.
WorkspaceType = Literal["root", "default", "standard", "ungrouped-hosts"]


class Workspace(BaseModel):
    id: str
    type: str
    name: str
    created: Optional[str] = None
    modified: Optional[str] = None
    parent_id: Optional[str] = None
    description: Optional[str] = None


class WorkspaceListMeta(BaseModel):
    count: Optional[int] = None
    limit: Optional[int] = None
    offset: Optional[int] = None


class WorkspaceListLinks(BaseModel):
    first: Optional[str] = None
    next: Optional[str] = None
    previous: Optional[str] = None
    last: Optional[str] = None


class WorkspaceListResponse(BaseModel):
    meta: Optional[WorkspaceListMeta] = None
    links: Optional[WorkspaceListLinks] = None
    data: Optional[list[Workspace]] = None
