"""
List query parameters and the normalized list response.
"""

from dataclasses import dataclass, field
from math import ceil
from typing import Optional

from pydantic import Field

from models.base import BaseSchema

# Filter values the list pages use for "no filter"
EMPTY_FILTER_VALUES = (None, "", "all")


class ListParams(BaseSchema):
    """
    Query parameters of a paginated list endpoint.

    The named filters are the ones the buyer-request list offers; other
    endpoints may pass any extra filter as a keyword (kept as an extra
    field). Empty filters ("all" in the UI) are left out of the query.
    """

    page: int = Field(1, ge=1)
    limit: int = Field(10, ge=1, le=100)
    search: Optional[str] = None
    status: Optional[str] = None
    category: Optional[str] = None
    destination_country: Optional[str] = None

    def to_query(self) -> dict:
        """Query params with unset / "all" filters removed."""
        return {
            key: value
            for key, value in self.model_dump().items()
            if value not in EMPTY_FILTER_VALUES
        }


@dataclass
class ListResult:
    """
    Items of a list endpoint plus the backend's total count.

    An empty result (no items, zero total) stands for every response
    shape the normalizer did not recognise.
    """
    items: list[dict] = field(default_factory=list)
    total: int = 0

    @property
    def is_empty(self) -> bool:
        return not self.items and self.total == 0

    def total_pages(self, page_size: int) -> int:
        """Ceiling of total / page_size, never less than 1."""
        if page_size <= 0:
            return 1
        return max(1, ceil(self.total / page_size))

    @classmethod
    def empty(cls) -> "ListResult":
        return cls()
