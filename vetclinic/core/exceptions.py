from typing import Dict, Any, Optional
from datetime import datetime, timezone
from fastapi import status
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
import logging

logger = logging.getLogger(__name__)


class BaseCustomException(Exception):
    """Base class for custom exceptions"""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
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
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            details=details,
            error_code=error_code or "VALIDATION_ERROR"
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
            status_code=status.HTTP_404_NOT_FOUND,
            details=details,
            error_code=error_code or "NOT_FOUND"
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
            status_code=status.HTTP_409_CONFLICT,
            details=details,
            error_code=error_code or "CONFLICT_ERROR"
        )


class RoomNotFoundError(NotFoundError):
    """Raised when a room number does not exist in the registry"""

    def __init__(self, room_number: str):
        super().__init__(
            message=f"Room {room_number} not found",
            details={"room_number": room_number},
            error_code="ROOM_NOT_FOUND"
        )


class RoomFullError(ConflictError):
    """Raised when a room has no free capacity left"""

    def __init__(self, room_number: str, capacity: Optional[int] = None):
        details = {"room_number": room_number}
        if capacity is not None:
            details["capacity"] = capacity
        super().__init__(
            message=f"Room {room_number} is fully occupied",
            details=details,
            error_code="ROOM_FULL"
        )


class InvalidTransitionError(ConflictError):
    """Raised for a status change the state machine does not allow"""

    def __init__(
        self,
        message: str = "Invalid status transition",
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None
    ):
        super().__init__(
            message=message,
            details=details,
            error_code=error_code or "INVALID_TRANSITION"
        )


class AdmissionClosedError(InvalidTransitionError):
    """Raised when mutating an admission that is Discharged or Transferred"""

    def __init__(self, admission_id: str, admission_status: str):
        super().__init__(
            message=f"Admission {admission_id} is already {admission_status}",
            details={"admission_id": admission_id, "status": admission_status},
            error_code="ADMISSION_CLOSED"
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
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details=details,
            error_code=error_code or "DATABASE_ERROR"
        )


class LockTimeoutError(BaseCustomException):
    """Raised when a room or admission lock cannot be acquired in time"""

    def __init__(self, lock_key: str, timeout: float):
        super().__init__(
            message=f"Resource {lock_key} is busy, try again",
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            details={"lock_key": lock_key, "timeout": timeout},
            error_code="RESOURCE_LOCKED"
        )


# Response models for errors
class ErrorResponse(BaseModel):
    """Standard error response model"""
    error: str
    message: str
    error_code: Optional[str] = None
    details: Optional[Dict[str, Any]] = None
    timestamp: Optional[str] = None
    request_id: Optional[str] = None


def create_error_response(
    exception: BaseCustomException,
    request_id: Optional[str] = None
) -> Dict[str, Any]:
    """Create standardized error response"""
    response = {
        "error": exception.__class__.__name__.replace("Error", " Error"),
        "message": exception.message,
        "error_code": exception.error_code,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "request_id": request_id
    }

    if exception.details:
        response["details"] = exception.details

    return response


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


# Context manager for error handling
class ErrorHandler:
    """Unit-of-work wrapper: rolls the session back on any error.

    Domain errors propagate unchanged so callers can branch on their kind;
    SQLAlchemy errors are converted to DatabaseError.
    """

    def __init__(self, operation: str, session=None, log_errors: bool = True):
        self.operation = operation
        self.session = session
        self.log_errors = log_errors

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            return False

        if self.session is not None:
            self.session.rollback()

        if issubclass(exc_type, SQLAlchemyError):
            raise handle_database_error(exc_val, self.operation) from exc_val

        if self.log_errors and not issubclass(exc_type, BaseCustomException):
            logger.error(f"Error in {self.operation}: {exc_val}")

        return False  # Don't suppress exceptions
