from typing import Dict, Any, Optional
from datetime import datetime
from http import HTTPStatus
from fastapi import status
from pydantic import BaseModel
import logging

from vaidya.core.config import UPDATE_POLICIES

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
            error_code=error_code or "NOT_FOUND_ERROR"
        )


class BusinessLogicError(BaseCustomException):
    """Exception for business logic errors"""

    def __init__(
        self,
        message: str = "Business logic error",
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            details=details,
            error_code=error_code or "BUSINESS_LOGIC_ERROR"
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


class StoreUnavailableError(DatabaseError):
    """The entity store failed to complete an operation"""

    def __init__(
        self,
        message: str = "Entity store unavailable",
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None
    ):
        super().__init__(
            message=message,
            details=details,
            error_code=error_code or "STORE_UNAVAILABLE"
        )


# Prescription domain errors

class InvalidPrescriptionError(BusinessLogicError):
    """The prescription payload is missing or malformed"""

    def __init__(self, message: str = "Prescription data is missing.", details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, details=details, error_code="INVALID_PRESCRIPTION")


class DuplicatePrescriptionError(BusinessLogicError):
    """A prescription already exists for the slot"""

    def __init__(self, slot_id: int):
        self.slot_id = slot_id
        super().__init__(
            message=f"A prescription already exists for slot ID: {slot_id}",
            details={"slot_id": slot_id},
            error_code="DUPLICATE_PRESCRIPTION"
        )


class UnknownUpdatePolicyError(BusinessLogicError):
    """The prescription update policy is not one the service knows"""

    def __init__(self, policy: str):
        self.policy = policy
        super().__init__(
            message=f"Unknown prescription update policy: {policy!r}",
            details={"policy": policy, "allowed": list(UPDATE_POLICIES)},
            error_code="UNKNOWN_UPDATE_POLICY"
        )


class EntityNotFoundError(NotFoundError):
    """No record of ``kind`` exists with ``entity_id``"""

    kind = "Entity"

    def __init__(self, entity_id: Any):
        self.entity_id = entity_id
        super().__init__(
            message=f"{self.kind} with ID {entity_id} not found.",
            details={"kind": self.kind, "id": entity_id},
            error_code=f"{self.kind.upper()}_NOT_FOUND"
        )


class UserNotFoundError(EntityNotFoundError):
    kind = "User"


class SlotNotFoundError(EntityNotFoundError):
    kind = "Slot"


class PatientNotFoundError(EntityNotFoundError):
    kind = "Patient"


class PrescriptionNotFoundError(EntityNotFoundError):
    kind = "Prescription"


# Response models for errors
class ErrorResponse(BaseModel):
    """Standard error response model"""
    timestamp: datetime
    status: int
    error: str
    message: str
    error_code: Optional[str] = None


def create_error_response(exception: Exception) -> ErrorResponse:
    """Map any exception raised by the core to the structured error payload"""
    if isinstance(exception, BaseCustomException):
        status_code = exception.status_code
        message = exception.message
        error_code = exception.error_code
    else:
        logger.exception("Unexpected error occurred", exc_info=exception)
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        message = "An unexpected error occurred."
        error_code = "UNEXPECTED_ERROR"

    return ErrorResponse(
        timestamp=datetime.now(),
        status=status_code,
        error=HTTPStatus(status_code).phrase,
        message=message,
        error_code=error_code
    )


def handle_database_error(error: Exception, operation: str = "database operation") -> StoreUnavailableError:
    """Handle database errors and convert to StoreUnavailableError"""
    logger.error(f"Database error during {operation}: {error}")

    error_message = "Database operation failed"
    if "connection" in str(error).lower():
        error_message = "Database connection failed"
    elif "timeout" in str(error).lower():
        error_message = "Database operation timed out"
    elif "constraint" in str(error).lower():
        error_message = "Database constraint violation"

    return StoreUnavailableError(
        message=error_message,
        details={"operation": operation, "original_error": str(error)}
    )
