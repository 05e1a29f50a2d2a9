"""
Unit tests for the field descriptor model and record projection.

Run: pytest tests/unit/test_field_descriptors.py -v
"""

import pytest

from exceptions import DescriptorPathError
from models.compliance import ComplianceIssue
from models.edit import FieldDescriptor, FieldKind
from services.field_descriptors import (
    PRODUCT_FORM_DESCRIPTORS,
    descriptor_for_path,
    descriptors_from_issues,
    path_for_issue,
    project,
    project_spec_table,
    read_path,
)

from tests.factories import ComplianceIssueFactory, ProductFactory


class TestFieldDescriptor:
    """Tests for FieldDescriptor construction."""

    def test_top_level_path(self):
        """Should have no group and use the path as key."""
        descriptor = FieldDescriptor(path="material_composition")

        assert descriptor.group is None
        assert descriptor.key == "material_composition"

    def test_nested_path(self):
        """Should split a depth-2 path into group and key."""
        descriptor = FieldDescriptor(path="quality_specs.ingredients")

        assert descriptor.group == "quality_specs"
        assert descriptor.key == "ingredients"

    def test_unnamed_editable_key_row(self):
        """Bare group path with editable key has an empty key."""
        descriptor = FieldDescriptor(path="quality_specs", editable_key=True)

        assert descriptor.group == "quality_specs"
        assert descriptor.key == ""

    @pytest.mark.parametrize("path", [
        "quality_specs.a.b",
        "packaging.type",
        "",
        "quality_specs.",
    ])
    def test_invalid_paths_raise(self, path):
        """Should reject deep, empty or unknown-group paths."""
        with pytest.raises(DescriptorPathError):
            FieldDescriptor(path=path)

    def test_editable_key_outside_group_raises(self):
        """Should reject an editable key on a top-level field."""
        with pytest.raises(DescriptorPathError):
            FieldDescriptor(path="name_local", editable_key=True)


class TestDescriptorForPath:
    """Tests for descriptor_for_path()"""

    def test_dimension_is_numeric(self):
        assert descriptor_for_path("dimensions_l_w_h.l").kind == FieldKind.NUMERIC

    def test_multiline_field(self):
        assert descriptor_for_path("quality_specs.ingredients").kind == FieldKind.MULTI_LINE

    def test_default_single_line_with_path_label(self):
        descriptor = descriptor_for_path("packaging_type")

        assert descriptor.kind == FieldKind.SINGLE_LINE
        assert descriptor.label == "packaging_type"

    def test_product_form_covers_dimensions(self):
        """Should include all three dimension fields."""
        paths = [descriptor.path for descriptor in PRODUCT_FORM_DESCRIPTORS]

        assert "dimensions_l_w_h.l" in paths
        assert "dimensions_l_w_h.w" in paths
        assert "dimensions_l_w_h.h" in paths


class TestDescriptorsFromIssues:
    """Tests for descriptors_from_issues()"""

    def test_maps_known_issue_types(self):
        """Should map issue types through the fixed table."""
        issues = [
            ComplianceIssue(**ComplianceIssueFactory.create(type="Material Composition")),
            ComplianceIssue(**ComplianceIssueFactory.create(type="FDA Registration")),
        ]

        pairs = descriptors_from_issues(issues)

        assert [descriptor.path for descriptor, _ in pairs] == [
            "material_composition",
            "quality_specs.fda_registration_status",
        ]
        assert pairs[0][0].label == "Material Composition"

    def test_unknown_type_goes_to_quality_specs(self):
        """Should slug unknown types into a quality_specs key."""
        issue = ComplianceIssue(**ComplianceIssueFactory.create(type="Shelf Life"))

        assert path_for_issue(issue) == "quality_specs.shelf_life"

    def test_skips_issues_without_values(self):
        """Should keep only issues with both your_value and required_value."""
        issues = [
            ComplianceIssue(**ComplianceIssueFactory.create(your_value=None)),
            ComplianceIssue(**ComplianceIssueFactory.create(type="Ingredients", required_value="")),
        ]

        assert descriptors_from_issues(issues) == []

    def test_duplicate_paths_keep_first_issue(self):
        """Should not edit the same field twice."""
        first = ComplianceIssue(**ComplianceIssueFactory.create(severity="critical"))
        second = ComplianceIssue(**ComplianceIssueFactory.create(severity="minor"))

        pairs = descriptors_from_issues([first, second])

        assert len(pairs) == 1
        assert pairs[0][1] is first


class TestProject:
    """Tests for project()"""

    def test_one_entry_per_descriptor_with_baseline_values(self, sample_product_data):
        """Should seed original and current value from the record."""
        descriptors = [
            descriptor_for_path("material_composition"),
            descriptor_for_path("quality_specs.origin"),
            descriptor_for_path("dimensions_l_w_h.w"),
        ]

        entries = project(sample_product_data, descriptors)

        assert len(entries) == 3
        assert [entry.original_value for entry in entries] == ["cotton", "local", 100.0]
        assert all(entry.current_value == entry.original_value for entry in entries)
        assert not any(entry.is_changed for entry in entries)

    def test_missing_values_are_empty(self):
        """Should read absent or None values as empty, never raise."""
        record = ProductFactory.create(quality_specs=None, dimensions_l_w_h={"l": None})
        record["material_composition"] = None
        descriptors = [
            descriptor_for_path("material_composition"),
            descriptor_for_path("quality_specs.ingredients"),
            descriptor_for_path("dimensions_l_w_h.l"),
        ]

        entries = project(record, descriptors)

        assert [entry.original_value for entry in entries] == ["", "", 0]

    def test_project_none_record(self):
        """Should project before the first fetch."""
        entries = project(None, [descriptor_for_path("name_local")])

        assert entries[0].original_value == ""

    def test_read_path_through_non_dict(self):
        assert read_path({"quality_specs": "flat text"}, "quality_specs.origin", "x") == "x"


class TestProjectSpecTable:
    """Tests for project_spec_table()"""

    def test_one_editable_entry_per_key(self, sample_product_data):
        """Should derive descriptors from the keys present now."""
        entries = project_spec_table(sample_product_data)

        assert [entry.original_key for entry in entries] == ["origin", "weight"]
        assert all(entry.descriptor.editable_key for entry in entries)
        assert all(not entry.is_new for entry in entries)

    def test_values_are_stringified(self):
        record = ProductFactory.create(quality_specs={"grams": 250, "note": None})

        entries = project_spec_table(record)

        assert [entry.original_value for entry in entries] == ["250", ""]

    def test_non_dict_group_projects_nothing(self):
        record = ProductFactory.create(quality_specs=None)

        assert project_spec_table(record) == []
