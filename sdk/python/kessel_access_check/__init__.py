"""Kessel access check Python SDK."""

from .cancellation import CancellationToken
from .client import AccessCheckClient
from .config import AccessCheckConfig, AccessCheckSettings, BulkCheckConfig, get_settings
from .engine import check_bulk, check_single, run_check
from .exceptions import (
    AccessCheckError,
    ApiError,
    AuthenticationError,
    CheckCancelledError,
    ConflictError,
    ForbiddenError,
    MalformedResponseError,
    NotFoundError,
    RateLimitError,
    TransportError,
    ValidationError,
)
from .services import fetch_default_workspace, fetch_root_workspace
from .state import CheckState, ResultCoordinator
from .types import (
    BulkCheckItem,
    BulkCheckOutcome,
    BulkPerItemRelation,
    BulkSameRelation,
    BulkSelfAccessCheckResult,
    CheckRequest,
    CheckResultItem,
    ConsistencyOptions,
    ConsistencyToken,
    ReporterReference,
    Resource,
    ResourceWithRelation,
    SelfAccessCheckResult,
    SingleCheck,
    Workspace,
)

__all__ = [
    "AccessCheckClient",
    "AccessCheckConfig",
    "AccessCheckSettings",
    "BulkCheckConfig",
    "get_settings",
    "CancellationToken",
    "ResultCoordinator",
    "CheckState",
    "check_single",
    "check_bulk",
    "run_check",
    "fetch_root_workspace",
    "fetch_default_workspace",
    "AccessCheckError",
    "ApiError",
    "TransportError",
    "MalformedResponseError",
    "CheckCancelledError",
    "ValidationError",
    "AuthenticationError",
    "ForbiddenError",
    "NotFoundError",
    "ConflictError",
    "RateLimitError",
    "ReporterReference",
    "Resource",
    "ResourceWithRelation",
    "ConsistencyToken",
    "ConsistencyOptions",
    "BulkCheckItem",
    "CheckResultItem",
    "BulkCheckOutcome",
    "SelfAccessCheckResult",
    "BulkSelfAccessCheckResult",
    "SingleCheck",
    "BulkSameRelation",
    "BulkPerItemRelation",
    "CheckRequest",
    "Workspace",
]
