"""Error types for the ProductLobby domain.

Defines a small hierarchy of exceptions raised by repositories, services and
route handlers. The server's exception handlers translate each one into an
HTTP status code and a JSON ``{"error": ...}`` body.
"""

from __future__ import annotations

from typing import Any, Optional


class ProductLobbyError(Exception):
    """Base error for all ProductLobby exceptions."""

    status_code: int = 500

    def __init__(self, message: str, details: Optional[Any] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class InvalidRequestError(ProductLobbyError):
    """Raised when request input fails a business rule."""

    status_code = 400


class AuthenticationRequiredError(ProductLobbyError):
    """Raised when an operation needs a signed-in user and none is present."""

    status_code = 401

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message)


class PermissionDeniedError(ProductLobbyError):
    """Raised when the caller is not allowed to perform an operation."""

    status_code = 403


class NotFoundError(ProductLobbyError):
    """Raised when a requested resource does not exist."""

    status_code = 404

    def __init__(self, resource: str, identifier: Optional[str] = None) -> None:
        message = f"{resource} not found" if identifier is None else f"{resource} '{identifier}' not found"
        super().__init__(message)
        self.resource = resource
        self.identifier = identifier


class ConflictError(ProductLobbyError):
    """Raised when an operation would duplicate existing state."""

    status_code = 409
