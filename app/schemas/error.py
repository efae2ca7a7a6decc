"""Error body returned by the domain exception handlers."""

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Body of every 4xx raised from a domain error.

    ``code`` is one of NOT_FOUND, DUPLICATE_RESOURCE, VALIDATION_ERROR,
    LEASE_OVERLAP, or a lease date range reason (INVALID_RANGE, END_BEFORE_START).
    """

    detail: str = Field(..., description="Human-readable error message")
    code: str = Field(..., description="Machine-readable error code")
