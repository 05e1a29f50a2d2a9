"""
Custom exception classes for the console core.

Every error carries a machine code, a human-readable message and an
HTTP-style status code so callers can render them uniformly.
"""

from typing import Optional, Any
from datetime import datetime, timezone


class AppError(Exception):
    """
    Base exception for all application errors.

    All custom exceptions inherit from this.

    Attributes:
        code: Error code (e.g., "PRODUCT_NOT_FOUND")
        message: Human-readable message
        status_code: HTTP status code
        details: Additional context
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc).isoformat()
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert to a displayable error document."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
                "timestamp": self.timestamp
            }
        }


class NotFoundError(AppError):
    """Resource not found (404)."""

    def __init__(
        self,
        resource: str,
        identifier: str,
        code: Optional[str] = None
    ):
        super().__init__(
            code=code or f"{resource.upper()}_NOT_FOUND",
            message=f"{resource} not found",
            status_code=404,
            details={"id": identifier}
        )


class ValidationError(AppError):
    """Validation failed (422)."""

    def __init__(
        self,
        message: str,
        code: str = "VALIDATION_ERROR",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=422,
            details=details
        )


# ===================
# REMOTE API ERRORS
# ===================

class ApiRequestError(AppError):
    """
    The backend answered with an error status or could not be reached.

    `body` keeps the decoded response (if any) so the message
    normalizer can pull the backend's own wording out of it.
    """

    def __init__(
        self,
        method: str,
        path: str,
        status_code: int = 503,
        body: Any = None,
        message: Optional[str] = None
    ):
        self.method = method
        self.path = path
        self.body = body
        super().__init__(
            code="API_REQUEST_FAILED",
            message=message or f"{status_code} error on {method} {path}",
            status_code=status_code,
            details={"method": method, "path": path}
        )


class RecordNotFoundError(ApiRequestError):
    """Backend returned 404 for a record."""

    def __init__(self, method: str, path: str, body: Any = None):
        super().__init__(method, path, status_code=404, body=body,
                         message=f"Record not found: {path}")
        self.code = "RECORD_NOT_FOUND"


class ForbiddenError(ApiRequestError):
    """Backend refused access to a record (401/403)."""

    def __init__(self, method: str, path: str, status_code: int = 403, body: Any = None):
        super().__init__(method, path, status_code=status_code, body=body,
                         message=f"Access denied: {path}")
        self.code = "ACCESS_DENIED"


# ===================
# EDITING ERRORS
# ===================

class DescriptorPathError(ValidationError):
    """Field descriptor path is deeper than two segments or names an unknown group."""

    def __init__(self, path: str, reason: str):
        super().__init__(
            code="DESCRIPTOR_INVALID_PATH",
            message=f"Invalid field path '{path}': {reason}",
            details={"path": path}
        )


class EditSessionError(ValidationError):
    """Operation not permitted on this edit entry."""

    def __init__(self, message: str, index: Optional[int] = None):
        super().__init__(
            code="EDIT_SESSION_INVALID_OPERATION",
            message=message,
            details={"index": index}
        )


class SpecKeyCollisionError(ValidationError):
    """Two entries of one nested group resolve to the same sanitized key."""

    def __init__(self, group: str, key: str, labels: list[str]):
        super().__init__(
            code="SPEC_KEY_COLLISION",
            message=f"Multiple attributes map to '{key}' in {group}: {', '.join(labels)}",
            details={"group": group, "key": key, "labels": labels}
        )
