"""
Custom Exception Classes

This module defines the exceptions raised by the tenant CMS so that
authorization, constraint and migration failures surface consistently,
both to HTTP callers and to the administrative migration runner.
"""

from enum import Enum
from typing import Any

from fastapi import status


class ErrorCode(str, Enum):
    """Machine-readable error codes included in error responses."""

    AUTH_FAILED = "AUTH_FAILED"
    AUTH_PERMISSION_DENIED = "AUTH_PERMISSION_DENIED"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    VALIDATION_CONSTRAINT = "VALIDATION_CONSTRAINT"
    VALIDATION_DUPLICATE_RESOURCE = "VALIDATION_DUPLICATE_RESOURCE"
    MIGRATION_PRECONDITION = "MIGRATION_PRECONDITION"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


class CMSException(Exception):
    """Base exception class for all CMS-related exceptions"""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        error_code: ErrorCode = ErrorCode.UNKNOWN_ERROR,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


# ============================================================================
# Authentication & Authorization Exceptions
# ============================================================================


class AuthenticationError(CMSException):
    """Raised when a supplied bearer token cannot be validated"""

    def __init__(self, message: str = "Could not validate credentials"):
        super().__init__(message=message, status_code=status.HTTP_401_UNAUTHORIZED, error_code=ErrorCode.AUTH_FAILED)


class AuthorizationDenied(CMSException):
    """Raised when the access rules deny an operation outright"""

    def __init__(
        self,
        message: str = "You do not have permission to perform this action",
        collection: str | None = None,
        operation: str | None = None,
    ):
        details = {}
        if collection:
            details["collection"] = collection
        if operation:
            details["operation"] = operation
        super().__init__(
            message=message,
            status_code=status.HTTP_403_FORBIDDEN,
            error_code=ErrorCode.AUTH_PERMISSION_DENIED,
            details=details,
        )


# ============================================================================
# Resource Not Found Exceptions
# ============================================================================


class ResourceNotFoundError(CMSException):
    """Raised when a record does not exist or is outside the caller's scope"""

    def __init__(self, resource_type: str, resource_id: Any | None = None):
        message = f"{resource_type} not found"
        if resource_id is not None:
            message = f"{resource_type} with id '{resource_id}' not found"
        super().__init__(
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            error_code=ErrorCode.RESOURCE_NOT_FOUND,
            details={"resource_type": resource_type, "resource_id": resource_id},
        )


# ============================================================================
# Data Model Constraint Exceptions
# ============================================================================


class ConstraintViolation(CMSException):
    """Raised when a write would break a data-model invariant"""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        status_code: int = status.HTTP_400_BAD_REQUEST,
        error_code: ErrorCode = ErrorCode.VALIDATION_CONSTRAINT,
        details: dict[str, Any] | None = None,
    ):
        error_details = details or {}
        if field:
            error_details["field"] = field
        super().__init__(message=message, status_code=status_code, error_code=error_code, details=error_details)


class DuplicateResourceError(ConstraintViolation):
    """Raised when a unique field already holds the given value"""

    def __init__(self, resource_type: str, field: str, value: Any):
        super().__init__(
            message=f"{resource_type} with {field} '{value}' already exists",
            field=field,
            status_code=status.HTTP_409_CONFLICT,
            error_code=ErrorCode.VALIDATION_DUPLICATE_RESOURCE,
            details={"resource_type": resource_type, "value": value},
        )


# ============================================================================
# Migration Exceptions
# ============================================================================


class MigrationPreconditionError(CMSException):
    """Raised before any write when the tenancy migration cannot start"""

    def __init__(self, message: str, missing: str | None = None):
        details = {"missing": missing} if missing else {}
        super().__init__(
            message=message,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            error_code=ErrorCode.MIGRATION_PRECONDITION,
            details=details,
        )
