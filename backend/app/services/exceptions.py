"""Service-layer exceptions.

Raised by the booking engine and the booking workflow service, and
translated to HTTP responses by the API layer (see ``app.api.errors``).
"""

from __future__ import annotations

import uuid
from typing import Any


class ServiceError(Exception):
    """Base exception for all service-layer errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class NotFoundError(ServiceError):
    """Raised when a property or booking identifier does not resolve."""

    def __init__(
        self,
        resource_type: str,
        identifier: uuid.UUID | str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(f"{resource_type} not found", details)
        self.resource_type = resource_type
        self.identifier = identifier


class ValidationError(ServiceError):
    """Raised for malformed or logically invalid input."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.field = field


class ConflictError(ServiceError):
    """Raised when a request conflicts with current state (dates taken, bad transition)."""
