from .access_checks import AccessChecksService
from .workspaces import WorkspacesService, fetch_default_workspace, fetch_root_workspace

__all__ = [
    "AccessChecksService",
    "WorkspacesService",
    "fetch_root_workspace",
    "fetch_default_workspace",
]
