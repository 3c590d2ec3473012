"""Common schema definitions used across the API."""

from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar('T')


class PaginationMetadata(BaseModel):
    """
    Metadata for pagination results.

    Attributes:
        page: The page returned, after clamping into the valid range
        per_page: The number of items per page, None when every item is on one page
        total: The total number of items across all pages
        total_pages: The number of pages, never less than 1
    """

    page: int
    per_page: Optional[int]
    total: int
    total_pages: int


class PaginatedResponse(BaseModel, Generic[T]):
    """
    A generic pagination response that can be used across all API endpoints that require pagination.

    Attributes:
        items: The list of items for the current page
        pagination: Information about the current page and total results
    """

    items: List[T]
    pagination: PaginationMetadata
