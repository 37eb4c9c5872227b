"""
Domain Error Taxonomy

Services raise these typed errors; the HTTP layer maps each one to a status
code through the exception handlers registered in ``uaifood.main``.
"""

from typing import Optional


class UaiFoodError(Exception):
    """
    Base class for all expected application errors.

    Attributes:
        message: Human-readable message returned to the caller
        status_code: HTTP status the error is surfaced as
    """

    status_code: int = 400
    default_message: str = "Request could not be processed."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        """Convert to the JSON error body."""
        return {"message": self.message}


class ValidationError(UaiFoodError):
    """Malformed input: empty item list, non-positive quantity, unknown enum."""
    status_code = 400
    default_message = "Invalid request data."


class NotFoundError(UaiFoodError):
    """Referenced order, item, category, user or address does not exist."""
    status_code = 404
    default_message = "Resource not found."


class ForbiddenError(UaiFoodError):
    """Authenticated principal lacks permission or ownership."""
    status_code = 403
    default_message = "Access denied: insufficient permission."


class UnauthenticatedError(UaiFoodError):
    """No valid credential present."""
    status_code = 401
    default_message = "Authentication required."


class InvalidTransitionError(UaiFoodError):
    """Status change that does not follow the order workflow."""
    status_code = 400
    default_message = "Order status cannot advance."


class ConflictError(UaiFoodError):
    """Unique constraint or referential restriction violated."""
    status_code = 400
    default_message = "Resource conflicts with existing data."
