"""Service-layer exception hierarchy."""
from __future__ import annotations


class ServiceError(Exception):
    """Base service error; surfaces as an opaque 500 unless subclassed."""


class NotFoundError(ServiceError):
    """Raised when a franchise-scoped entity is not found."""


class ConflictError(ServiceError):
    """Raised when a write collides with existing data, e.g. a duplicate invoice number."""


class ValidationError(ServiceError):
    """Raised when business validation fails."""


class MissingBookingError(ValidationError):
    """Raised when strict booking references are enabled and a booking does not exist."""


class PaymentPolicyError(ValidationError):
    """Raised when a payment update is rejected by the active payment policy."""
