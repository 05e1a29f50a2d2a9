"""
Custom exceptions module.
"""

from exceptions.errors import (
    # Base exceptions
    AppError,
    NotFoundError,
    ValidationError,

    # Remote API
    ApiRequestError,
    RecordNotFoundError,
    ForbiddenError,

    # Editing
    DescriptorPathError,
    EditSessionError,
    SpecKeyCollisionError,
)

__all__ = [
    # Base
    "AppError",
    "NotFoundError",
    "ValidationError",

    # Remote API
    "ApiRequestError",
    "RecordNotFoundError",
    "ForbiddenError",

    # Editing
    "DescriptorPathError",
    "EditSessionError",
    "SpecKeyCollisionError",
]
