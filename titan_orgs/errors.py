"""Domain error kinds raised by the hierarchy and authorization core.

Every kind carries the HTTP status the route layer answers with, so the
translation lives in one place (see ``middleware.configure_error_handlers``).
"""

from __future__ import annotations


class TitanError(Exception):
    """Base class for all domain errors."""

    status_code: int = 500
    default_message: str = "Internal error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFoundError(TitanError):
    """A referenced organization, role or report does not exist."""

    status_code = 404
    default_message = "Not found"


class ValidationError(TitanError):
    """The request violates a domain invariant."""

    status_code = 400
    default_message = "Validation failed"


class AuthenticationError(TitanError):
    """The acting identity is missing or lacks the required CoC position."""

    status_code = 401
    default_message = "Not authorized"


class HierarchyCorruptionError(TitanError):
    """Traversal exceeded its bound or found an inconsistent hierarchy."""

    status_code = 500
    default_message = "Organization hierarchy is corrupt"
