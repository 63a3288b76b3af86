from typing import Dict, Any, Optional
from http import HTTPStatus
import logging

logger = logging.getLogger(__name__)


class BaseCustomException(Exception):
    """Base class for custom exceptions"""

    def __init__(
        self,
        message: str,
        status_code: int = HTTPStatus.INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.error_code = error_code
        super().__init__(self.message)


class ValidationError(BaseCustomException):
    """Exception for validation errors"""

    def __init__(
        self,
        message: str = "Validation failed",
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None
    ):
        super().__init__(
            message=message,
            status_code=HTTPStatus.UNPROCESSABLE_ENTITY,
            details=details,
            error_code=error_code or "VALIDATION_ERROR"
        )


class AuthorizationError(BaseCustomException):
    """Exception for authorization errors"""

    def __init__(
        self,
        message: str = "Access denied",
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None
    ):
        super().__init__(
            message=message,
            status_code=HTTPStatus.FORBIDDEN,
            details=details,
            error_code=error_code or "AUTHORIZATION_ERROR"
        )


class NotFoundError(BaseCustomException):
    """Exception for resource not found errors"""

    def __init__(
        self,
        message: str = "Resource not found",
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None
    ):
        super().__init__(
            message=message,
            status_code=HTTPStatus.NOT_FOUND,
            details=details,
            error_code=error_code or "NOT_FOUND_ERROR"
        )


class ConflictError(BaseCustomException):
    """Exception for conflict errors"""

    def __init__(
        self,
        message: str = "Resource conflict",
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None
    ):
        super().__init__(
            message=message,
            status_code=HTTPStatus.CONFLICT,
            details=details,
            error_code=error_code or "CONFLICT_ERROR"
        )


class DatabaseError(BaseCustomException):
    """Exception for database errors"""

    def __init__(
        self,
        message: str = "Database operation failed",
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None
    ):
        super().__init__(
            message=message,
            status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
            details=details,
            error_code=error_code or "DATABASE_ERROR"
        )


# Registry error kinds

class AccessDenied(AuthorizationError):
    """Caller's role or identity does not satisfy the operation's guard"""

    def __init__(self, message: str = "Access denied", details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, details=details, error_code="ACCESS_DENIED")


class NotAssignedDoctor(AuthorizationError):
    """Confirming doctor is not the appointment's doctor"""

    def __init__(self, message: str = "Caller is not the assigned doctor", details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, details=details, error_code="NOT_ASSIGNED_DOCTOR")


class RoleAlreadyAssigned(ConflictError):
    """Identity already holds a role"""

    def __init__(self, message: str = "Identity already holds a role", details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, details=details, error_code="ROLE_ALREADY_ASSIGNED")


class AlreadyRegistered(ConflictError):
    """Doctor or lab is already registered"""

    def __init__(self, message: str = "Identity is already registered", details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, details=details, error_code="ALREADY_REGISTERED")


class AlreadyConfirmed(ConflictError):
    """Appointment was confirmed before"""

    def __init__(self, message: str = "Appointment already confirmed", details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, details=details, error_code="ALREADY_CONFIRMED")


class AdminAlreadyExists(ConflictError):
    """The registry already has its administrator"""

    def __init__(self, message: str = "Administrator already assigned", details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, details=details, error_code="ADMIN_ALREADY_EXISTS")


class DoctorNotRegistered(NotFoundError):
    """Referenced identity is not a registered doctor"""

    def __init__(self, message: str = "Doctor is not registered", details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, details=details, error_code="DOCTOR_NOT_REGISTERED")


class PatientNotRegistered(NotFoundError):
    """Referenced identity has no patient profile"""

    def __init__(self, message: str = "Patient is not registered", details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, details=details, error_code="PATIENT_NOT_REGISTERED")


class RecordNotFound(NotFoundError):
    """Referenced medical record ID was never allocated"""

    def __init__(self, message: str = "Medical record not found", details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, details=details, error_code="RECORD_NOT_FOUND")


class AppointmentNotFound(NotFoundError):
    """Referenced appointment ID was never allocated"""

    def __init__(self, message: str = "Appointment not found", details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, details=details, error_code="APPOINTMENT_NOT_FOUND")


def handle_database_error(error: Exception, operation: str = "database operation") -> DatabaseError:
    """Handle database errors and convert to DatabaseError"""
    logger.error(f"Database error during {operation}: {error}")

    error_message = "Database operation failed"
    if "connection" in str(error).lower():
        error_message = "Database connection failed"
    elif "timeout" in str(error).lower():
        error_message = "Database operation timed out"
    elif "constraint" in str(error).lower():
        error_message = "Database constraint violation"

    return DatabaseError(
        message=error_message,
        details={"operation": operation, "original_error": str(error)},
        error_code="DATABASE_OPERATION_ERROR"
    )
