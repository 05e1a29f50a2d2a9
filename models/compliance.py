"""
Compliance analysis schemas.

Issues are produced by the backend's compliance scoring; the console only
turns them into editable fields.
"""

from pydantic import Field
from typing import Optional
from enum import Enum

from models.base import BaseSchema


class ComplianceSeverity(str, Enum):
    """Issue severity as graded by the backend."""
    CRITICAL = "critical"
    MAJOR = "major"
    MINOR = "minor"


class ComplianceIssue(BaseSchema):
    """
    One compliance finding for a product against a destination country.

    your_value / required_value are only present when the issue is
    about a concrete field value, which is what makes it repairable.
    """

    id: Optional[int] = None
    type: str = Field(..., description="Issue type, e.g. 'Material Composition'")
    severity: ComplianceSeverity = ComplianceSeverity.MINOR
    description: str = ""
    your_value: Optional[str] = None
    required_value: Optional[str] = None
    category: Optional[str] = None

    @property
    def is_repairable(self) -> bool:
        return bool(self.your_value) and bool(self.required_value)
