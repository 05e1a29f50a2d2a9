"""
List/detail consistency guard.

A list page and a detail modal can both point at the same entity. When
the entity is deleted, the refreshed list and the cleared selection are
applied together, after the last await, so no observer ever sees a
fresh list next to a selection of an entity that no longer exists.
"""

from typing import Any, Optional
import structlog

from config import settings
from models.base import RecordId
from models.listing import EMPTY_FILTER_VALUES, ListParams, ListResult
from services.entity_service import RemoteEntityService
from utils.text_utils import normalize_error_message

logger = structlog.get_logger(__name__)

DEFAULT_LOAD_FAILURE_MESSAGE = "Failed to load list"


class ListDetailGuard:
    """
    List state plus the selection a detail modal is open on.

    Attributes:
        items: Current page of records
        total: Total count reported by the backend
        error: Last list-load error message, None when the last load worked
        selected: Record the modal is open on, or None
        modal_open: Whether the detail/delete modal is showing
        query: Page, page size and filters (ListParams)
    """

    def __init__(
        self,
        service: RemoteEntityService,
        params: Optional[dict] = None,
        page_size: Optional[int] = None
    ):
        self.service = service
        self.page_size = page_size or settings.default_page_size
        self.query = ListParams(**{"page": 1, "limit": self.page_size, **(params or {})})

        self.items: list[dict] = []
        self.total: int = 0
        self.error: Optional[str] = None
        self.selected: Optional[dict] = None
        self.modal_open: bool = False

    @property
    def total_pages(self) -> int:
        return ListResult(items=self.items, total=self.total).total_pages(self.page_size)

    # ===================
    # LIST
    # ===================

    @property
    def params(self) -> dict:
        """Query string of the current page and filters."""
        return self.query.to_query()

    def set_filters(self, **filters: Any):
        """
        Change filters and go back to page 1.

        None, "" and "all" remove a filter.
        """
        cleaned = {
            key: None if value in EMPTY_FILTER_VALUES else value
            for key, value in filters.items()
        }
        self.query = ListParams(**{**self.query.model_dump(), **cleaned, "page": 1})

    def set_page(self, page: int):
        self.query.page = max(1, page)

    def _apply(self, result: ListResult):
        self.items = result.items
        self.total = result.total or len(result.items)
        self.error = None

    async def refresh(self) -> bool:
        """
        Re-fetch the current page.

        Returns:
            False on failure (error is set, previous items are kept)
        """
        try:
            result = await self.service.list(self.params)
        except Exception as e:
            self.error = normalize_error_message(e, DEFAULT_LOAD_FAILURE_MESSAGE)
            logger.error("list_refresh_failed", resource=self.service.resource, error=self.error)
            return False

        self._apply(result)
        return True

    # ===================
    # SELECTION
    # ===================

    def select(self, entity: dict):
        """Open the modal on an entity."""
        self.selected = entity
        self.modal_open = True

    def close(self):
        """Close the modal and forget the selection."""
        self.selected = None
        self.modal_open = False

    # ===================
    # DELETE
    # ===================

    async def delete_selected(self) -> None:
        """Delete the entity the modal is open on."""
        if self.selected is None:
            return
        await self.delete(self.selected["id"])

    async def delete(self, entity_id: RecordId) -> None:
        """
        Delete an entity, then refresh the list and drop any selection of it.

        Raises:
            ApiRequestError: Delete failed; list, selection and modal are
                left untouched so the caller can show the error and retry
        """
        try:
            await self.service.delete(entity_id)
        except Exception as e:
            logger.error(
                "list_entity_delete_failed",
                resource=self.service.resource,
                entity_id=entity_id,
                error=normalize_error_message(e, "Delete failed")
            )
            raise

        try:
            result: Optional[ListResult] = await self.service.list(self.params)
            error = None
        except Exception as e:
            result = None
            error = normalize_error_message(e, DEFAULT_LOAD_FAILURE_MESSAGE)

        # No await below: list and selection change in one step
        if result is not None:
            self._apply(result)
        else:
            self.items = [item for item in self.items if item.get("id") != entity_id]
            self.total = max(0, self.total - 1)
            self.error = error
            logger.error("list_refresh_after_delete_failed", resource=self.service.resource, error=error)

        if self.selected is not None and self.selected.get("id") == entity_id:
            self.close()

        logger.info("list_entity_deleted", resource=self.service.resource, entity_id=entity_id)
