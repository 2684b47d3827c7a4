"""Kessel access check exceptions."""

from __future__ import annotations

from typing import Any, Optional


class AccessCheckError(Exception):
    """Base exception for all access check errors."""


class CheckCancelledError(AccessCheckError):
    """The consumer cancelled the invocation while a request was in flight."""


class ApiError(AccessCheckError):
    """Uniform error shape for failed calls and per-item failures."""

    def __init__(self, code: int, message: str = "", details: Optional[list[Any]] = None) -> None:
        self.code = code
        self.message = message
        self.details: list[Any] = list(details) if details else []
        super().__init__(f"[{code}] {message}")

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message, "details": list(self.details)}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ApiError):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __hash__(self) -> int:
        return hash((self.code, self.message))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r}, details={self.details!r})"


class TransportError(ApiError):
    """The request never produced an HTTP response."""

    def __init__(self, message: str = "Request failed", details: Optional[list[Any]] = None) -> None:
        super().__init__(0, message, details)


class MalformedResponseError(ApiError):
    """A response body could not be read as the expected structure."""

    def __init__(self, code: int, message: str = "Malformed response body", details: Optional[list[Any]] = None) -> None:
        super().__init__(code, message, details)


class ValidationError(ApiError):
    """400 Bad Request."""

    def __init__(self, message: str = "Invalid request", details: Optional[list[Any]] = None, code: int = 400) -> None:
        super().__init__(code, message, details)


class AuthenticationError(ApiError):
    """401 Unauthorized."""

    def __init__(self, message: str = "Authentication required", details: Optional[list[Any]] = None, code: int = 401) -> None:
        super().__init__(code, message, details)


class ForbiddenError(ApiError):
    """403 Forbidden."""

    def __init__(self, message: str = "Insufficient permissions", details: Optional[list[Any]] = None, code: int = 403) -> None:
        super().__init__(code, message, details)


class NotFoundError(ApiError):
    """404 Not Found."""

    def __init__(self, message: str = "Resource not found", details: Optional[list[Any]] = None, code: int = 404) -> None:
        super().__init__(code, message, details)


class ConflictError(ApiError):
    """409 Conflict."""

    def __init__(self, message: str = "Resource already exists", details: Optional[list[Any]] = None, code: int = 409) -> None:
        super().__init__(code, message, details)


class RateLimitError(ApiError):
    """429 Too Many Requests."""

    def __init__(self, message: str = "Rate limit exceeded", details: Optional[list[Any]] = None, code: int = 429) -> None:
        super().__init__(code, message, details)


_STATUS_ERRORS: dict[int, type[ApiError]] = {
    400: ValidationError,
    401: AuthenticationError,
    403: ForbiddenError,
    404: NotFoundError,
    409: ConflictError,
    429: RateLimitError,
}


def error_for_status(
    status_code: int,
    message: str,
    details: Optional[list[Any]] = None,
    code: Optional[int] = None,
) -> ApiError:
    """Build the ApiError subclass matching an HTTP status.

    ``code`` is the code reported in the error body, which wins over the
    HTTP status when present.
    """
    if code is None:
        code = status_code
    cls = _STATUS_ERRORS.get(status_code)
    if cls is None:
        return ApiError(code, message, details)
    return cls(message, details, code=code)
