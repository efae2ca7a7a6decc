"""Custom domain exceptions for the application."""

from app.domain.lease_lifecycle import DateRangeError

# Stable, machine-readable error codes for API consumers.
NOT_FOUND = "NOT_FOUND"
DUPLICATE_RESOURCE = "DUPLICATE_RESOURCE"
VALIDATION_ERROR = "VALIDATION_ERROR"
LEASE_OVERLAP = "LEASE_OVERLAP"


class DomainError(Exception):
    """Base exception for domain/business logic errors."""

    pass


class NotFoundError(DomainError):
    """Raised when a requested resource does not exist."""

    pass


class DuplicateResourceError(DomainError):
    """Raised when attempting to create or update a resource that would violate a uniqueness constraint."""

    pass


class LeaseOverlapError(DuplicateResourceError):
    """Raised when a lease write would give a property two leases covering the same day."""

    pass


class DomainValidationError(DomainError):
    """Raised when business rules or domain validation fail (e.g. invalid dates, missing required fields)."""

    pass


class LeaseDateRangeError(DomainValidationError):
    """Raised when a lease is about to be persisted with an unusable date range.

    The reason (INVALID_RANGE / END_BEFORE_START) doubles as the API error code.
    """

    def __init__(self, reason: DateRangeError, message: str | None = None):
        self.reason = reason
        super().__init__(message or reason.message)
