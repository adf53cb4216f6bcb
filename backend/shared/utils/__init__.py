"""
Utilities module: HTTP exceptions.
"""

from shared.utils.exceptions import (
    NotFoundError,
    UnauthorizedError,
    ForbiddenError,
    MissingPermissionError,
    LocationAccessError,
    ValidationError,
    ConflictError,
    ExternalServiceError,
)

__all__ = [
    "NotFoundError",
    "UnauthorizedError",
    "ForbiddenError",
    "MissingPermissionError",
    "LocationAccessError",
    "ValidationError",
    "ConflictError",
    "ExternalServiceError",
]
