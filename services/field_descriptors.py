"""
Field descriptor model.

Declares which attributes of a product are editable, how each one is
typed at the input boundary, and projects a fetched record into edit
entries. Reads are forgiving: a missing path yields an empty value,
never an error.
"""

from typing import Any, Iterable, Optional
import structlog

from models.compliance import ComplianceIssue
from models.edit import EditEntry, FieldDescriptor, FieldKind, GroupKind, NESTED_GROUPS
from models.product import QUALITY_SPECS
from utils.text_utils import slugify_issue_type

logger = structlog.get_logger(__name__)


# ===================
# FIELD CATALOG
# ===================

MULTILINE_PATHS = frozenset({
    "description_local",
    "material_composition",
    "durability_claim",
    "quality_specs.ingredients",
    "quality_specs.nutrition_facts",
    "quality_specs.allergen_info",
    "quality_specs.allergen_information",
    "quality_specs.labeling_compliance",
})

# Compliance issue type -> product field it is repaired through
ISSUE_TYPE_PATHS = {
    "Material Composition": "material_composition",
    "Nutrition Facts": "quality_specs.nutrition_facts",
    "Allergen Info": "quality_specs.allergen_info",
    "Ingredients": "quality_specs.ingredients",
    "Packaging Type": "packaging_type",
    "Durability Claim": "durability_claim",
    "Country of Origin": "quality_specs.country_of_origin",
    "FDA Registration": "quality_specs.fda_registration_status",
    "Material Grade": "quality_specs.material_grade",
    "Labeling Compliance": "quality_specs.labeling_compliance",
}

PRODUCT_FORM_FIELDS = [
    ("name_local", "Product Name"),
    ("description_local", "Description"),
    ("material_composition", "Material Composition"),
    ("production_technique", "Production Technique"),
    ("finishing_type", "Finishing Type"),
    ("durability_claim", "Durability Claim"),
    ("packaging_type", "Packaging Type"),
    ("weight_net", "Net Weight"),
    ("weight_gross", "Gross Weight"),
    ("dimensions_l_w_h.l", "Length (cm)"),
    ("dimensions_l_w_h.w", "Width (cm)"),
    ("dimensions_l_w_h.h", "Height (cm)"),
]


def kind_for_path(path: str) -> FieldKind:
    """Input shape for a path: numeric for dimensions, else by the multi-line list."""
    group = path.split(".")[0]
    if "." in path and NESTED_GROUPS.get(group) == GroupKind.DIMENSIONS:
        return FieldKind.NUMERIC
    if path in MULTILINE_PATHS:
        return FieldKind.MULTI_LINE
    return FieldKind.SINGLE_LINE


def descriptor_for_path(path: str, label: Optional[str] = None) -> FieldDescriptor:
    """
    Build a descriptor with its kind inferred from the path.

    Raises:
        DescriptorPathError: Path too deep or under an unknown group
    """
    return FieldDescriptor(path=path, label=label or path, kind=kind_for_path(path))


PRODUCT_FORM_DESCRIPTORS = [descriptor_for_path(path, label) for path, label in PRODUCT_FORM_FIELDS]


# ===================
# COMPLIANCE ISSUES
# ===================

def path_for_issue(issue: ComplianceIssue) -> str:
    """Product field an issue is repaired through; unknown types land in quality_specs."""
    mapped = ISSUE_TYPE_PATHS.get(issue.type)
    if mapped:
        return mapped
    return f"{QUALITY_SPECS}.{slugify_issue_type(issue.type)}"


def descriptors_from_issues(issues: Iterable[ComplianceIssue]) -> list[tuple[FieldDescriptor, ComplianceIssue]]:
    """
    Descriptors for the repairable issues of an analysis.

    Only issues carrying both the product's value and the required value
    are repairable. When two issues point at the same field the first one
    is kept, so a field is never edited twice in one session.

    Returns:
        (descriptor, issue) pairs in issue order
    """
    pairs = []
    seen_paths = set()

    for issue in issues:
        if not issue.is_repairable:
            continue
        path = path_for_issue(issue)
        if path in seen_paths:
            logger.debug("duplicate_issue_path_skipped", issue_type=issue.type, path=path)
            continue
        seen_paths.add(path)
        pairs.append((descriptor_for_path(path, issue.type), issue))

    return pairs


# ===================
# PROJECTION
# ===================

def _empty_value(kind: FieldKind) -> Any:
    return 0 if kind == FieldKind.NUMERIC else ""


def read_path(record: Optional[dict], path: str, default: Any = "") -> Any:
    """
    Value at a dotted path, or default when any segment is missing or None.
    """
    current: Any = record or {}
    for segment in path.split("."):
        if not isinstance(current, dict):
            return default
        current = current.get(segment)
        if current is None:
            return default
    return current


def project(record: Optional[dict], descriptors: Iterable[FieldDescriptor]) -> list[EditEntry]:
    """
    One edit entry per descriptor, seeded from the record.

    Args:
        record: Baseline record (may be None before the first fetch)
        descriptors: Fixed descriptor list

    Returns:
        Entries with original_value == current_value == value at path
    """
    entries = []
    for descriptor in descriptors:
        value = read_path(record, descriptor.path, _empty_value(descriptor.kind))
        entries.append(EditEntry(
            descriptor=descriptor,
            original_value=value,
            current_value=value,
            original_key=descriptor.key,
            current_key=descriptor.key,
        ))
    return entries


def project_spec_table(record: Optional[dict], group: str = QUALITY_SPECS) -> list[EditEntry]:
    """
    Editable-key entries for every key currently in a nested map.

    There is no fixed schema: the descriptors are derived from whatever
    keys the record holds at projection time. Values become strings.
    """
    specs = read_path(record, group, {})
    if not isinstance(specs, dict):
        return []

    entries = []
    for key, value in specs.items():
        text = "" if value is None else str(value)
        descriptor = FieldDescriptor(
            path=f"{group}.{key}" if key and "." not in key else group,
            label=key,
            kind=FieldKind.MULTI_LINE if f"{group}.{key}" in MULTILINE_PATHS else FieldKind.SINGLE_LINE,
            editable_key=True,
        )
        entries.append(EditEntry(
            descriptor=descriptor,
            original_value=text,
            current_value=text,
            original_key=key,
            current_key=key,
        ))
    return entries
