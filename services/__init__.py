"""
Editing, ordering and list services.

Each module handles one concern of the console core.
"""

from services.entity_service import (
    RemoteEntityService,
    ProductService,
    BuyerRequestService,
    EducationalModuleService,
    EducationalArticleService,
)
from services.field_descriptors import (
    PRODUCT_FORM_DESCRIPTORS,
    descriptor_for_path,
    descriptors_from_issues,
    project,
    project_spec_table,
)
from services.edit_session import EditSession
from services.payload_reconciler import (
    PayloadReconciler,
    reconcile,
    build_single_field_payload,
)
from services.patch_invoker import PatchInvoker, PatchResult
from services.reorder_controller import (
    ReorderController,
    ReorderResult,
    ReorderState,
    Direction,
)
from services.consistency_guard import ListDetailGuard
from services.repair_workflows import (
    EditingSurface,
    BatchRepairSurface,
    InlineComplianceEditor,
    ProductEditor,
    SmartRepairSurface,
)

__all__ = [
    # Remote entities
    "RemoteEntityService",
    "ProductService",
    "BuyerRequestService",
    "EducationalModuleService",
    "EducationalArticleService",

    # Editing pipeline
    "PRODUCT_FORM_DESCRIPTORS",
    "descriptor_for_path",
    "descriptors_from_issues",
    "project",
    "project_spec_table",
    "EditSession",
    "PayloadReconciler",
    "reconcile",
    "build_single_field_payload",
    "PatchInvoker",
    "PatchResult",

    # Ordering
    "ReorderController",
    "ReorderResult",
    "ReorderState",
    "Direction",

    # Lists
    "ListDetailGuard",

    # Surfaces
    "EditingSurface",
    "BatchRepairSurface",
    "InlineComplianceEditor",
    "ProductEditor",
    "SmartRepairSurface",
]
