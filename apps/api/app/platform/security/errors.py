from __future__ import annotations


class AuthorizationError(Exception):
    """Base authorization error for role and identity enforcement failures."""


class UnauthorizedError(AuthorizationError):
    """Raised when the caller's identity cannot be resolved from the security context."""

    def __init__(self, message: str = "User ID not found in context") -> None:
        self.message = message
        super().__init__(message)
