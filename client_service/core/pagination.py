"""
Core pagination utilities for API endpoints.
"""
from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from fastapi import Query
import math

class PageParams:
    """
    Page parameters for pagination.

    Attributes:
        page: Page number (1-indexed)
        limit: Number of items per page
        offset: Number of items skipped before this page
    """
    def __init__(
        self,
        page: int = Query(1, ge=1, description="Page number"),
        limit: int = Query(10, ge=1, le=100, description="Items per page")
    ):
        self.page = page
        self.limit = limit
        self.offset = (page - 1) * limit


class PageMeta(BaseModel):
    """
    Pagination metadata returned next to a page of items.

    Attributes:
        current_page: Current page number
        total_pages: Total number of pages
        total_clients: Total number of matching items
        has_next_page: Whether there is a next page
        has_prev_page: Whether there is a previous page
    """
    current_page: int
    total_pages: int
    total_clients: int
    has_next_page: bool
    has_prev_page: bool

    class Config:
        alias_generator = to_camel
        populate_by_name = True


def build_page_meta(total: int, page_params: PageParams) -> PageMeta:
    """
    Compute page metadata for ``total`` matching items.

    Args:
        total: Total number of items matching the filters
        page_params: Pagination parameters

    Returns:
        PageMeta: Pagination metadata
    """
    total_pages = math.ceil(total / page_params.limit)

    return PageMeta(
        current_page=page_params.page,
        total_pages=total_pages,
        total_clients=total,
        has_next_page=page_params.page < total_pages,
        has_prev_page=page_params.page > 1
    )
