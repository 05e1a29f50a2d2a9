"""
Base schema for all models.
"""

from pydantic import BaseModel, ConfigDict
from typing import Union

# Backend ids are integers, but list/detail URLs sometimes carry them as strings.
RecordId = Union[int, str]


class BaseSchema(BaseModel):
    """
    Base for all schemas.

    Features:
        - Auto-trim whitespace from strings
        - Validate on attribute assignment
        - Allow ORM objects (from_attributes)
        - Keep unknown fields (records and filters are open documents)
    """
    model_config = ConfigDict(
        from_attributes=True,
        str_strip_whitespace=True,
        validate_assignment=True,
        extra="allow"
    )
