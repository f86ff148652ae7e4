"""
Business errors raised by the booking core and how they surface over HTTP.

Every error here is an expected outcome the client can act on, so the
response carries the specific reason rather than a generic failure.
"""
from fastapi import HTTPException, status


class DomainError(Exception):
    """Base class for booking/capacity rejections."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Request rejected."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidRequest(DomainError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request."


class CapacityExceeded(DomainError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Requested quantity exceeds available capacity."


class InsufficientCapacity(DomainError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Not enough available capacity to approve this booking."


class InvalidTransition(DomainError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Booking status change is not allowed."


class Forbidden(DomainError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "You do not have permission to modify this resource."


class NotFound(DomainError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found."


class StorageUnavailable(DomainError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "Storage is temporarily unavailable. Please retry."


def to_http_exception(exc: DomainError) -> HTTPException:
    return HTTPException(status_code=exc.status_code, detail=exc.message)
