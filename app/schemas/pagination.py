from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class PaginatedResponse(BaseModel, Generic[T]):
    """One page of a property, tenant or lease listing."""

    items: list[T]
    total: int = Field(..., description="Number of rows matching the filters, across all pages")
    page: int
    page_size: int
