"""
Custom Exceptions

Application-specific exceptions with machine-readable error codes.
"""

from typing import Any, Optional


class RealmGateException(Exception):
    """Base exception for all realmgate errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.error_code = error_code or "INTERNAL_ERROR"
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for logging or API responses."""
        return {
            "error": {
                "code": self.error_code,
                "message": self.message,
                "details": self.details,
            }
        }


class InvalidArgumentError(RealmGateException, ValueError):
    """A required argument is missing or has an unusable value."""

    def __init__(
        self,
        message: str,
        argument: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        extra_details = details or {}
        if argument:
            extra_details["argument"] = argument
        super().__init__(
            message=message,
            error_code="INVALID_ARGUMENT",
            details=extra_details,
        )
        self.argument = argument


class ConfigurationError(RealmGateException):
    """The hosting environment is not set up the way realm loading needs."""

    def __init__(
        self,
        message: str,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code="CONFIGURATION_ERROR",
            details=details,
        )


# =============================================================================
# Realm Lifecycle Exceptions
# =============================================================================


class RealmLifecycleError(RealmGateException):
    """Base exception for failures while binding or unbinding a realm."""

    def __init__(
        self,
        message: str,
        realm_name: str,
        original_error: Optional[Exception] = None,
        error_code: str = "REALM_LIFECYCLE_ERROR",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        extra_details = details or {}
        extra_details["realm_name"] = realm_name
        if original_error:
            extra_details["original_error"] = str(original_error)
            extra_details["error_type"] = type(original_error).__name__
        super().__init__(
            message=message,
            error_code=error_code,
            details=extra_details,
        )
        self.realm_name = realm_name
        self.original_error = original_error


class RealmBindError(RealmLifecycleError):
    """A realm failed to accept the database handle."""

    def __init__(
        self,
        realm_name: str,
        original_error: Optional[Exception] = None,
    ) -> None:
        super().__init__(
            message=f"Failed to bind realm '{realm_name}'",
            realm_name=realm_name,
            original_error=original_error,
            error_code="REALM_BIND_ERROR",
        )


class RealmUnbindError(RealmLifecycleError):
    """A realm failed to release the database handle."""

    def __init__(
        self,
        realm_name: str,
        original_error: Optional[Exception] = None,
    ) -> None:
        super().__init__(
            message=f"Failed to unbind realm '{realm_name}'",
            realm_name=realm_name,
            original_error=original_error,
            error_code="REALM_UNBIND_ERROR",
        )


class RealmNotBoundError(RealmGateException):
    """A database-backed realm was used before a handle was bound to it."""

    def __init__(self, realm_name: str) -> None:
        super().__init__(
            message=f"Realm '{realm_name}' has no database handle bound",
            error_code="REALM_NOT_BOUND",
            details={"realm_name": realm_name},
        )
        self.realm_name = realm_name
