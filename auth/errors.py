"""
Typed failures raised by the auth core and the resource handlers.

Each exception carries the HTTP status it maps to; the handlers in
``api.middleware`` turn them into responses.
"""

from __future__ import annotations

from fastapi import status


class ServiceError(Exception):
    """Base class for every failure surfaced to API callers."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal Server Error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


# ── Input ──────────────────────────────────────────────────────────────


class InputError(ServiceError):
    """Malformed or unacceptable request input."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request."


class ConflictError(InputError):
    """The record being created already exists."""

    status_code = status.HTTP_409_CONFLICT
    default_message = "Resource already exists."


# ── Authentication ─────────────────────────────────────────────────────


class AuthError(ServiceError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Failed to authenticate."


class MissingTokenError(AuthError):
    default_message = "No token provided."


class InvalidTokenError(AuthError):
    default_message = "Failed to authenticate token."


class ExpiredTokenError(AuthError):
    default_message = "Token has expired."


class InvalidCredentialsError(AuthError):
    default_message = "Invalid credentials."


class AccountNotFoundError(AuthError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "You must have an account to make this request."


# ── Infrastructure ─────────────────────────────────────────────────────


class InfrastructureError(ServiceError):
    """Store or runtime failure; details are logged, never returned."""


class StoreUnavailableError(InfrastructureError):
    pass


class PasswordHashError(InfrastructureError):
    pass
