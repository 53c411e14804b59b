from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid or no actor is present."""


class AuthorizationError(DomainError):
    """Raised when an actor lacks permission for an action."""


class InconsistentDataError(DomainError):
    """Raised when collaborators hand back contradictory data."""


class ApiError(DomainError):
    """Raised when the remote absence API fails or answers with an error."""

    def __init__(self, message: str, *, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
