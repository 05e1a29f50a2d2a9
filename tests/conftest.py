"""
Shared test fixtures.
"""

import sys
from pathlib import Path

# Add project root to Python path
project_dir = Path(__file__).parent.parent
sys.path.insert(0, str(project_dir))

import copy
import pytest
from typing import Optional

from exceptions import ApiRequestError, RecordNotFoundError
from models.listing import ListResult

# ===================
# FAKE REMOTE SERVICE
# ===================


class FakeEntityService:
    """
    In-memory stand-in for RemoteEntityService.

    Records are stored by id. Updates merge top-level keys (the backend's
    partial-update contract). Failures are injected per operation.
    """

    def __init__(self, resource: str = "product", records: Optional[list] = None):
        self.resource = resource
        self.records: dict = {}
        self.calls: list = []
        self.fail_update_ids: set = set()
        self.fail_update_all = False
        self.fail_list = False
        self.fail_get = False
        self.fail_delete = False
        self.error_body = {"message": "Backend rejected the request"}
        for record in records or []:
            self.records[record["id"]] = copy.deepcopy(record)

    def _error(self, method: str, record_id=None) -> ApiRequestError:
        path = f"/{self.resource}/{record_id}/" if record_id is not None else f"/{self.resource}/"
        return ApiRequestError(method, path, status_code=500, body=self.error_body)

    async def get(self, record_id) -> dict:
        self.calls.append(("get", record_id))
        if self.fail_get:
            raise self._error("GET", record_id)
        if record_id not in self.records:
            raise RecordNotFoundError("GET", f"/{self.resource}/{record_id}/")
        return copy.deepcopy(self.records[record_id])

    async def update(self, record_id, payload: dict) -> dict:
        self.calls.append(("update", record_id, copy.deepcopy(payload)))
        if self.fail_update_all or record_id in self.fail_update_ids:
            raise self._error("PATCH", record_id)
        if record_id not in self.records:
            raise RecordNotFoundError("PATCH", f"/{self.resource}/{record_id}/")
        self.records[record_id].update(copy.deepcopy(payload))
        return copy.deepcopy(self.records[record_id])

    async def delete(self, record_id) -> None:
        self.calls.append(("delete", record_id))
        if self.fail_delete:
            raise self._error("DELETE", record_id)
        self.records.pop(record_id, None)

    async def list(self, params: Optional[dict] = None) -> ListResult:
        self.calls.append(("list", dict(params or {})))
        if self.fail_list:
            raise self._error("GET")
        items = [copy.deepcopy(record) for record in self.records.values()]
        return ListResult(items=items, total=len(items))

    def updates(self) -> list:
        return [call for call in self.calls if call[0] == "update"]


# ===================
# FIXTURES
# ===================

@pytest.fixture
def sample_product_data() -> dict:
    """Product record as the backend returns it."""
    return {
        "id": 7,
        "name_local": "Kain Tenun Ikat",
        "category_id": 3,
        "description_local": "Hand-woven ikat cloth",
        "material_composition": "cotton",
        "production_technique": "hand woven",
        "finishing_type": "natural dye",
        "quality_specs": {"origin": "local", "weight": "2kg"},
        "durability_claim": "5 years",
        "packaging_type": "carton",
        "dimensions_l_w_h": {"l": 200.0, "w": 100.0, "h": 1.0},
        "weight_net": "2",
        "weight_gross": "2.3",
        "created_at": "2025-12-05T10:00:00Z",
        "updated_at": "2025-12-05T10:00:00Z"
    }


@pytest.fixture
def product_service(sample_product_data) -> FakeEntityService:
    return FakeEntityService("product", [sample_product_data])


@pytest.fixture
def sample_modules() -> list:
    """Three educational modules in canonical order."""
    return [
        {"id": 1, "title": "Export Basics", "order_index": 0},
        {"id": 2, "title": "Documentation", "order_index": 1},
        {"id": 3, "title": "Logistics", "order_index": 2},
    ]


@pytest.fixture
def module_service(sample_modules) -> FakeEntityService:
    return FakeEntityService("educational_module", sample_modules)
