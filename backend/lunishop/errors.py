# Overview: Domain error taxonomy shared by services, decorators, and routes.

"""
Every error a service raises on purpose derives from ShopError and carries
the HTTP status it maps to. Routes turn them into responses with
responses.error_response(); anything else is an internal error.
"""


class ShopError(Exception):
    """Base class for expected domain failures."""
    status_code = 500

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(ShopError):
    """400-level input problem, rejected before any write."""
    status_code = 400


class InsufficientStockError(ValidationError):
    """A stock row holds less than the requested amount."""


class SameStatusError(ValidationError):
    """Order status update to the status it already has."""


class UnauthenticatedError(ShopError):
    """Missing, invalid, or expired bearer credential."""
    status_code = 401


class ForbiddenError(ShopError):
    """Authenticated, but the role ranks too low."""
    status_code = 403


class NotFoundError(ShopError):
    status_code = 404


class ConflictError(ShopError):
    """409-level business rule conflict (e.g., duplicate product name)."""
    status_code = 409


class InternalError(ShopError):
    status_code = 500
