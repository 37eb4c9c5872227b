"""
Core module initialization.
Exports configuration, logging and error utilities.
"""

from uaifood.core.config import get_settings, Settings, EnvironmentMode, setup_logging
from uaifood.core.errors import (
    UaiFoodError,
    ValidationError,
    NotFoundError,
    ForbiddenError,
    UnauthenticatedError,
    InvalidTransitionError,
    ConflictError,
)

__all__ = [
    "get_settings",
    "Settings",
    "EnvironmentMode",
    "setup_logging",
    "UaiFoodError",
    "ValidationError",
    "NotFoundError",
    "ForbiddenError",
    "UnauthenticatedError",
    "InvalidTransitionError",
    "ConflictError",
]
