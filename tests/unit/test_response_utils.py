"""
Unit tests for response normalization.

Run: pytest tests/unit/test_response_utils.py -v
"""

import pytest

from models.listing import ListResult
from utils.response_utils import normalize_list_response, unwrap_record


class TestNormalizeListResponse:
    """Tests for normalize_list_response()"""

    def test_wrapped_list(self):
        result = normalize_list_response({"success": True, "data": [{"id": 1}, {"id": 2}]})

        assert len(result.items) == 2
        assert result.total == 2

    def test_wrapped_list_with_count(self):
        result = normalize_list_response({"success": True, "data": [{"id": 1}], "count": 40})

        assert result.total == 40

    def test_wrapped_paginated(self):
        result = normalize_list_response(
            {"success": True, "data": {"results": [{"id": 1}], "count": 5}}
        )

        assert result.items == [{"id": 1}]
        assert result.total == 5

    def test_raw_list(self):
        result = normalize_list_response([{"id": 1}, {"id": 2}, {"id": 3}])

        assert result.total == 3

    def test_paginated(self):
        result = normalize_list_response({"results": [{"id": 1}], "count": 21})

        assert result.items == [{"id": 1}]
        assert result.total == 21

    @pytest.mark.parametrize("response", [
        None,
        "oops",
        {},
        {"success": False, "data": [{"id": 1}]},
        {"success": True, "data": "nothing"},
        {"results": None},
        {"detail": "error"},
    ])
    def test_unknown_shapes_are_empty(self, response):
        result = normalize_list_response(response)

        assert result.is_empty
        assert result.items == []


class TestUnwrapRecord:
    """Tests for unwrap_record()"""

    def test_wrapped(self):
        assert unwrap_record({"success": True, "data": {"id": 1}}) == {"id": 1}

    def test_failed_envelope(self):
        assert unwrap_record({"success": False, "data": {"id": 1}}) == {}

    def test_raw(self):
        assert unwrap_record({"id": 1, "success_rate": 0.5}) == {"id": 1, "success_rate": 0.5}

    def test_non_dict(self):
        assert unwrap_record([{"id": 1}]) == {}


class TestListResult:
    """Tests for ListResult"""

    @pytest.mark.parametrize("total,page_size,expected", [
        (0, 10, 1),
        (10, 10, 1),
        (11, 10, 2),
        (5, 0, 1),
    ])
    def test_total_pages(self, total, page_size, expected):
        assert ListResult(total=total).total_pages(page_size) == expected

    def test_empty(self):
        assert ListResult.empty().is_empty
