"""
Domain errors raised by the booking engine and their HTTP mapping.

Services raise these; routes let them propagate and the handlers registered
in ``register_exception_handlers`` turn them into JSON responses.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError

from app.core.logging_config import get_logger

logger = get_logger()


class BookingError(Exception):
    """Base class for business errors."""

    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "BOOKING_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NotFoundError(BookingError):
    status_code = status.HTTP_404_NOT_FOUND
    error_code = "NOT_FOUND"


class ForbiddenError(BookingError):
    status_code = status.HTTP_403_FORBIDDEN
    error_code = "FORBIDDEN"


class ConflictError(BookingError):
    status_code = status.HTTP_409_CONFLICT
    error_code = "CONFLICT"


class InvalidStateError(BookingError):
    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "INVALID_STATE"


class InvalidTransitionError(InvalidStateError):
    """Raised when a booking status change is not in the transition table."""

    def __init__(self, from_state: str, to_state: str):
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(f"Cannot change booking status from {from_state} to {to_state}")


class ValidationError(BookingError):
    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "VALIDATION_ERROR"


# ---------------------------------------------------------------------
# HTTP MAPPING
# ---------------------------------------------------------------------
async def booking_error_handler(request: Request, exc: BookingError):
    logger.warning(f"{exc.error_code}: {request.method} {request.url.path} -> {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.message, "code": exc.error_code},
    )


async def datastore_error_handler(request: Request, exc: DBAPIError):
    logger.bind(log_type="infra").error(
        f"DATASTORE ERROR: {request.method} {request.url.path} -> {exc}"
    )
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"message": "Datastore unavailable", "code": "INFRASTRUCTURE_ERROR"},
    )


async def integrity_error_handler(request: Request, exc: IntegrityError):
    logger.warning(f"INTEGRITY: {request.method} {request.url.path} -> {exc.orig}")
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={"message": "Request conflicts with existing data", "code": "CONFLICT"},
    )


def register_exception_handlers(app: FastAPI):
    app.add_exception_handler(BookingError, booking_error_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(OperationalError, datastore_error_handler)
    app.add_exception_handler(DBAPIError, datastore_error_handler)
