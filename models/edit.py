"""
Editing-surface data classes: field descriptors and edit entries.

A descriptor says where an editable field lives inside a record
(top-level, or one level down inside a known nested group) and how it
is typed at the input boundary. An entry is one descriptor plus the
value it had in the baseline record and the value the user typed.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from exceptions import DescriptorPathError
from models.product import QUALITY_SPECS, DIMENSIONS


class FieldKind(str, Enum):
    """Input shape of an editable field."""
    SINGLE_LINE = "single_line"
    MULTI_LINE = "multi_line"
    NUMERIC = "numeric"


class GroupKind(str, Enum):
    """How a nested group's values are merged into a payload."""
    SPEC_MAP = "spec_map"      # free-form string map, keys are sanitized
    DIMENSIONS = "dimensions"  # fixed numeric keys, values coerced to float


NESTED_GROUPS: dict[str, GroupKind] = {
    QUALITY_SPECS: GroupKind.SPEC_MAP,
    DIMENSIONS: GroupKind.DIMENSIONS,
}

MAX_PATH_DEPTH = 2


def is_blank(value: Any) -> bool:
    """None, or a string with nothing but whitespace."""
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


@dataclass(frozen=True)
class FieldDescriptor:
    """
    Location and input shape of one editable field.

    Attributes:
        path: Dot-separated location, e.g. "material_composition" or
            "quality_specs.ingredients". For editable-key descriptors of
            rows not yet named, the bare group name ("quality_specs").
        label: Display label
        kind: Input shape
        editable_key: The map key itself is user-editable (spec table rows)
    """
    path: str
    label: str = ""
    kind: FieldKind = FieldKind.SINGLE_LINE
    editable_key: bool = False

    def __post_init__(self):
        segments = self.path.split(".")
        if not self.path or any(not s for s in segments):
            raise DescriptorPathError(self.path, "empty path segment")
        if len(segments) > MAX_PATH_DEPTH:
            raise DescriptorPathError(self.path, f"deeper than {MAX_PATH_DEPTH} levels")
        if len(segments) == 2 and segments[0] not in NESTED_GROUPS:
            raise DescriptorPathError(self.path, f"unknown nested group '{segments[0]}'")
        if self.editable_key and segments[0] not in NESTED_GROUPS:
            raise DescriptorPathError(self.path, "editable keys only exist inside a nested group")

    @property
    def segments(self) -> list[str]:
        return self.path.split(".")

    @property
    def group(self) -> Optional[str]:
        """Nested group name, or None for top-level fields."""
        segments = self.segments
        if len(segments) == 2 or self.editable_key:
            return segments[0]
        return None

    @property
    def key(self) -> str:
        """Key inside the group, or the top-level attribute name."""
        segments = self.segments
        if len(segments) == 2:
            return segments[1]
        return "" if self.editable_key else segments[0]


@dataclass
class EditEntry:
    """
    One editable field inside an edit session.

    Values are compared with strict equality: nested objects are handled
    as strings at the edit boundary, never deep-compared.
    """
    descriptor: FieldDescriptor
    original_value: Any = ""
    current_value: Any = ""
    original_key: str = ""
    current_key: str = ""
    is_new: bool = False

    @property
    def path(self) -> str:
        return self.descriptor.path

    @property
    def group(self) -> Optional[str]:
        return self.descriptor.group

    @property
    def label(self) -> str:
        return self.descriptor.label or self.current_key or self.descriptor.path

    @property
    def key_changed(self) -> bool:
        return self.descriptor.editable_key and self.current_key != self.original_key

    @property
    def is_changed(self) -> bool:
        return self.current_value != self.original_value or self.key_changed

    @property
    def is_effective(self) -> bool:
        """Whether this entry contributes to a reconciled payload."""
        if self.is_new:
            return not is_blank(self.current_key) and not is_blank(self.current_value)
        return self.is_changed
