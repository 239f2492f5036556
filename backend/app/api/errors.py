"""Translate service-layer exceptions into HTTP errors."""

from fastapi import HTTPException, status

from app.services.exceptions import ConflictError, NotFoundError, ServiceError, ValidationError

_STATUS_CODES: dict[type[ServiceError], int] = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ValidationError: 422,  # Unprocessable Content
    ConflictError: status.HTTP_409_CONFLICT,
}


def to_http_exception(exc: ServiceError) -> HTTPException:
    """Map a ``ServiceError`` to the matching ``HTTPException`` (400 if unmapped)."""
    for error_type, status_code in _STATUS_CODES.items():
        if isinstance(exc, error_type):
            return HTTPException(status_code=status_code, detail=exc.message)
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=exc.message)
