"""
Pydantic schemas for backend records, plus the editing data classes.
"""

from models.base import (
    BaseSchema,
    RecordId,
)
from models.product import (
    QUALITY_SPECS,
    DIMENSIONS,
)
from models.compliance import (
    ComplianceSeverity,
    ComplianceIssue,
)
from models.edit import (
    FieldKind,
    GroupKind,
    NESTED_GROUPS,
    FieldDescriptor,
    EditEntry,
    is_blank,
)
from models.listing import ListParams, ListResult

__all__ = [
    # Base
    "BaseSchema",
    "RecordId",

    # Product
    "QUALITY_SPECS",
    "DIMENSIONS",

    # Compliance
    "ComplianceSeverity",
    "ComplianceIssue",

    # Editing
    "FieldKind",
    "GroupKind",
    "NESTED_GROUPS",
    "FieldDescriptor",
    "EditEntry",
    "is_blank",

    # Lists
    "ListParams",
    "ListResult",
]
