"""
Product editing surfaces.

Each surface wires the editing pipeline for one screen:

    fetch baseline -> project into an edit session -> user edits
        -> reconcile against the baseline -> apply -> refresh

Surfaces:
    BatchRepairSurface: edit every repairable compliance issue at once,
        closes after a successful save
    InlineComplianceEditor: issue fields plus free-form quality-spec rows,
        stays open and re-projects after a save
    ProductEditor: the full product form with the quality-spec table
    SmartRepairSurface: one field, closes after a successful save
"""

from abc import ABC, abstractmethod
from typing import Awaitable, Callable, Iterable, Optional
import structlog

from exceptions import AppError, NotFoundError
from models.base import RecordId
from models.compliance import ComplianceIssue
from models.edit import EditEntry, FieldKind
from models.product import QUALITY_SPECS
from services.edit_session import EditSession
from services.entity_service import RemoteEntityService
from services.field_descriptors import (
    PRODUCT_FORM_DESCRIPTORS,
    descriptor_for_path,
    descriptors_from_issues,
    project,
    project_spec_table,
)
from services.patch_invoker import PatchInvoker, PatchResult
from services.payload_reconciler import PayloadReconciler, build_single_field_payload
from utils.text_utils import normalize_error_message

logger = structlog.get_logger(__name__)

OnSaved = Callable[[dict], Awaitable[None]]

FETCH_FAILURE_MESSAGE = "Failed to load product"
SAVE_FAILURE_MESSAGE = "Failed to repair product"


class EditingSurface(ABC):
    """
    Base surface: owns the baseline and at most one edit session.

    Args:
        service: Product service
        record_id: Product being edited
        on_saved: Caller hook run after a successful update (re-analysis,
            parent refresh); receives the updated record
        reconciler: Payload reconciler (collision policy)
    """

    # Whether a successful save closes the surface
    closes_on_save = True

    def __init__(
        self,
        service: RemoteEntityService,
        record_id: RecordId,
        on_saved: Optional[OnSaved] = None,
        reconciler: Optional[PayloadReconciler] = None
    ):
        self.service = service
        self.record_id = record_id
        self.on_saved = on_saved
        self.reconciler = reconciler or PayloadReconciler()
        self.invoker = PatchInvoker(service, failure_message=SAVE_FAILURE_MESSAGE)

        self.baseline: Optional[dict] = None
        self.session: Optional[EditSession] = None
        self.error: Optional[str] = None
        self.is_open = False

    @abstractmethod
    def _project(self, baseline: dict) -> list[EditEntry]:
        """Edit entries this surface shows for a baseline."""

    # ===================
    # LIFECYCLE
    # ===================

    async def open(self) -> bool:
        """
        Fetch the baseline and start a fresh session.

        Any previous session is discarded, never merged.

        Returns:
            False if the fetch failed (no session is created)
        """
        self.session = None
        try:
            baseline = await self.service.get(self.record_id)
            if not baseline:
                raise NotFoundError(self.service.resource, str(self.record_id))
        except Exception as e:
            self.error = normalize_error_message(e, FETCH_FAILURE_MESSAGE)
            self.is_open = False
            logger.error("surface_fetch_failed", record_id=self.record_id, error=self.error)
            return False

        self.baseline = baseline
        self.session = EditSession(baseline, self._project(baseline))
        self.error = None
        self.is_open = True
        logger.debug(
            "surface_opened",
            surface=type(self).__name__,
            record_id=self.record_id,
            entries=len(self.session)
        )
        return True

    def close(self):
        """Discard the session; nothing is persisted."""
        self.session = None
        self.is_open = False

    # ===================
    # SAVE
    # ===================

    def build_payload(self) -> dict:
        if self.session is None:
            return {}
        return self.reconciler.reconcile(self.session, self.baseline)

    async def _after_update(self, record: dict):
        if self.on_saved is not None:
            await self.on_saved(record)

    async def save(self) -> PatchResult:
        """
        Reconcile and apply the session.

        On failure the session is left exactly as it was so the user can
        retry without retyping.
        """
        if self.session is None:
            return PatchResult(success=False, message="Nothing to save")

        try:
            payload = self.build_payload()
        except AppError as e:
            self.error = e.message
            return PatchResult(success=False, message=e.message)

        result = await self.invoker.apply(self.record_id, payload, on_complete=self._after_update)
        if not result.success:
            self.error = result.message
            return result

        self.error = None
        if self.closes_on_save:
            self.close()
        else:
            await self._reproject()
        return result

    async def _reproject(self):
        await self.open()


class BatchRepairSurface(EditingSurface):
    """
    All repairable compliance issues of an analysis in one form.

    issues[i] describes entry i (severity, required value) for display.
    """

    def __init__(
        self,
        service: RemoteEntityService,
        record_id: RecordId,
        issues: Iterable[ComplianceIssue],
        on_saved: Optional[OnSaved] = None,
        reconciler: Optional[PayloadReconciler] = None
    ):
        super().__init__(service, record_id, on_saved, reconciler)
        pairs = descriptors_from_issues(issues)
        self.descriptors = [descriptor for descriptor, _ in pairs]
        self.issues = [issue for _, issue in pairs]

    def _project(self, baseline: dict) -> list[EditEntry]:
        return project(baseline, self.descriptors)


class InlineComplianceEditor(BatchRepairSurface):
    """
    Issue fields plus new quality-spec rows, edited in place.

    Stays open after a save: the session is rebuilt from the refreshed
    record, keeping the rows the user started but did not finish.
    """

    closes_on_save = False

    def add_attribute(self) -> int:
        return self.session.add_new(QUALITY_SPECS)

    async def _reproject(self):
        staged = [
            entry for entry in self.session.new_entries()
            if not entry.is_effective
        ] if self.session else []

        if await self.open() and staged:
            self.session.entries.extend(staged)


class ProductEditor(EditingSurface):
    """
    Full product form: fixed fields, dimensions and the quality-spec table.

    Quality-spec rows can be renamed and added; an existing attribute
    cannot be deleted through a partial update.
    """

    closes_on_save = False

    def _project(self, baseline: dict) -> list[EditEntry]:
        return project(baseline, PRODUCT_FORM_DESCRIPTORS) + project_spec_table(baseline)

    def add_attribute(self) -> int:
        return self.session.add_new(QUALITY_SPECS)

    def spec_rows(self) -> list[tuple[int, EditEntry]]:
        """(index, entry) of the quality-spec table rows."""
        return [
            (index, entry) for index, entry in enumerate(self.session.entries)
            if entry.descriptor.editable_key
        ]


class SmartRepairSurface(EditingSurface):
    """
    Single-field repair.

    The baseline is fetched again at save time so the merge of a nested
    field starts from the record as it is now.
    """

    def __init__(
        self,
        service: RemoteEntityService,
        record_id: RecordId,
        path: str,
        label: Optional[str] = None,
        on_saved: Optional[OnSaved] = None
    ):
        super().__init__(service, record_id, on_saved)
        self.descriptor = descriptor_for_path(path, label)

    def _project(self, baseline: dict) -> list[EditEntry]:
        return project(baseline, [self.descriptor])

    @property
    def value(self):
        return self.session[0].current_value if self.session else None

    def set_value(self, value):
        self.session.set(0, value)

    @property
    def can_save(self) -> bool:
        if self.session is None:
            return False
        value = self.value
        if self.descriptor.kind == FieldKind.NUMERIC:
            return value is not None and str(value).strip() != ""
        return bool(value)

    def build_payload(self) -> dict:
        return build_single_field_payload(self.baseline, self.descriptor.path, self.value)

    async def save(self) -> PatchResult:
        if self.session is None:
            return PatchResult(success=False, message="Nothing to save")

        try:
            self.baseline = await self.service.get(self.record_id)
        except Exception as e:
            self.error = normalize_error_message(e, SAVE_FAILURE_MESSAGE)
            return PatchResult(success=False, message=self.error)

        return await super().save()
