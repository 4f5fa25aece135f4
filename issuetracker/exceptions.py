"""
Tracker errors.

Handlers raise these instead of returning half-built pages; the app maps each
one to a response in ``issuetracker.main``:

    LoginRequired        -> clear session, redirect to /account/login
    AuthorizationDenied  -> 403
    NotFound             -> 404
    ValidationFailed     -> 400
    StorageError         -> 500

AuthenticationFailed never leaves the login handler.
"""

from typing import Optional, Any, Dict


class TrackerError(Exception):
    """Base exception for all tracker errors"""

    status_code = 500

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details
        }


class AuthenticationFailed(TrackerError):
    """Username or password did not match"""

    status_code = 401

    def __init__(self, message: str = "Authentication failed"):
        super().__init__(message, code="AUTH_FAILED")


class LoginRequired(TrackerError):
    """Request carries no usable session"""

    status_code = 401

    def __init__(self, message: str = "Login required"):
        super().__init__(message, code="LOGIN_REQUIRED")


class AuthorizationDenied(TrackerError):
    """Authenticated, but the role is not allowed here"""

    status_code = 403

    def __init__(self, message: str = "Not authorized"):
        super().__init__(message, code="NOT_AUTHORIZED")


class NotFound(TrackerError):
    status_code = 404

    def __init__(self, resource: str, key: Any):
        super().__init__(
            f"{resource} not found: {key}",
            code="NOT_FOUND",
            details={"resource": resource, "key": str(key)}
        )


class ValidationFailed(TrackerError):
    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(
            message,
            code="VALIDATION_ERROR",
            details={"field": field} if field else {}
        )


class StorageError(TrackerError):
    """The store rejected or failed an operation"""

    status_code = 500

    def __init__(self, message: str = "Storage operation failed", operation: Optional[str] = None):
        super().__init__(
            message,
            code="STORAGE_ERROR",
            details={"operation": operation} if operation else {}
        )
