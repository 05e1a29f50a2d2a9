"""
Optimistic reorder controller.

Moves an entity one position up or down in a list ordered by
order_index. The swap is rendered before the backend confirms it, and
every move ends by re-fetching the canonical order, whether both
updates succeeded or not. Local order is therefore never left as an
unconfirmed guess once a move settles.

States:
    IDLE -> OPTIMISTIC_APPLIED -> PERSISTING -> RECONCILING  -> IDLE
                                             -> ROLLING_BACK -> IDLE
"""

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional
import structlog

from config import settings
from models.base import RecordId
from services.entity_service import RemoteEntityService
from utils.text_utils import normalize_error_message

logger = structlog.get_logger(__name__)

DEFAULT_FAILURE_MESSAGE = "Failed to change order"
DEFAULT_LOAD_FAILURE_MESSAGE = "Failed to load list"


class ReorderState(str, Enum):
    """Phase of a move."""
    IDLE = "idle"
    OPTIMISTIC_APPLIED = "optimistic_applied"
    PERSISTING = "persisting"
    RECONCILING = "reconciling"
    ROLLING_BACK = "rolling_back"


class Direction(str, Enum):
    UP = "up"
    DOWN = "down"


@dataclass
class ReorderResult:
    """Outcome of a settled move."""
    success: bool
    message: Optional[str] = None


def sort_by_order(items: list[dict]) -> list[dict]:
    """Stable sort on order_index (missing counts as 0)."""
    return sorted(items, key=lambda item: item.get("order_index") or 0)


class ReorderController:
    """
    Holds an ordered list and performs optimistic moves on it.

    Args:
        service: Remote service of the listed entity
        list_params: Query params used for every (re-)fetch
        scope: Optional filter; moves only consider neighbours inside it
            (e.g. articles of the selected module)
        on_render: Called with the sorted list each time local order changes
    """

    def __init__(
        self,
        service: RemoteEntityService,
        list_params: Optional[dict] = None,
        scope: Optional[Callable[[dict], bool]] = None,
        on_render: Optional[Callable[[list[dict]], None]] = None,
        failure_message: str = DEFAULT_FAILURE_MESSAGE
    ):
        self.service = service
        self.list_params = list_params if list_params is not None else {"limit": settings.reorder_list_limit}
        self.scope = scope
        self.on_render = on_render
        self.failure_message = failure_message

        self.items: list[dict] = []
        self.state = ReorderState.IDLE
        self.error: Optional[str] = None
        self.transitions: list[ReorderState] = []

    # ===================
    # LIST STATE
    # ===================

    def visible(self) -> list[dict]:
        """Items inside the scope, in display order."""
        if self.scope is None:
            return list(self.items)
        return [item for item in self.items if self.scope(item)]

    def _render(self, items: list[dict]):
        self.items = sort_by_order(items)
        if self.on_render is not None:
            self.on_render(self.items)

    def _transition(self, state: ReorderState):
        self.state = state
        self.transitions.append(state)
        logger.debug("reorder_state", state=state.value)

    async def load(self) -> bool:
        """
        Replace local state with the canonical list.

        Returns:
            False if the fetch failed (error is set, items are kept)
        """
        try:
            result = await self.service.list(self.list_params)
        except Exception as e:
            self.error = normalize_error_message(e, DEFAULT_LOAD_FAILURE_MESSAGE)
            logger.error("reorder_list_fetch_failed", resource=self.service.resource, error=self.error)
            return False

        self._render(result.items)
        return True

    # ===================
    # MOVES
    # ===================

    async def move_up(self, entity_id: RecordId) -> Optional[ReorderResult]:
        return await self.move(entity_id, Direction.UP)

    async def move_down(self, entity_id: RecordId) -> Optional[ReorderResult]:
        return await self.move(entity_id, Direction.DOWN)

    async def move(self, entity_id: RecordId, direction: Direction) -> Optional[ReorderResult]:
        """
        Swap an entity with its neighbour.

        Args:
            entity_id: Entity to move
            direction: Direction.UP or Direction.DOWN

        Returns:
            None when the move is a no-op (unknown id, edge of the list, or
            another move still in flight); otherwise the settled result
        """
        if self.state != ReorderState.IDLE:
            logger.warning("reorder_ignored_busy", entity_id=entity_id, state=self.state.value)
            return None

        visible = self.visible()
        index = next((i for i, item in enumerate(visible) if item.get("id") == entity_id), -1)
        if index == -1:
            return None

        target = index - 1 if Direction(direction) == Direction.UP else index + 1
        if target < 0 or target >= len(visible):
            return None

        first, second = visible[index], visible[target]
        first_order, second_order = first.get("order_index") or 0, second.get("order_index") or 0

        # Copies: the canonical records we were handed are never mutated
        swapped = {
            first["id"]: {**first, "order_index": second_order},
            second["id"]: {**second, "order_index": first_order},
        }
        self._render([swapped.get(item.get("id"), item) for item in self.items])
        self._transition(ReorderState.OPTIMISTIC_APPLIED)

        logger.info(
            "reorder_requested",
            resource=self.service.resource,
            entity_id=entity_id,
            direction=Direction(direction).value,
            swapped_with=second["id"]
        )

        try:
            self._transition(ReorderState.PERSISTING)
            outcomes = await asyncio.gather(
                self.service.update(first["id"], {"order_index": second_order}),
                self.service.update(second["id"], {"order_index": first_order}),
                return_exceptions=True,
            )
            failures = [outcome for outcome in outcomes if isinstance(outcome, BaseException)]

            if failures:
                self._transition(ReorderState.ROLLING_BACK)
                persist_error = normalize_error_message(failures[0], self.failure_message)
                self.error = persist_error
                logger.error(
                    "reorder_persist_failed",
                    resource=self.service.resource,
                    entity_id=entity_id,
                    failures=len(failures),
                    error=self.error
                )
            else:
                self._transition(ReorderState.RECONCILING)
                self.error = None

            # Both branches converge on the backend's order
            loaded = await self.load()
        finally:
            self._transition(ReorderState.IDLE)

        if failures:
            # A failed re-fetch must not hide why the move failed
            self.error = persist_error
            return ReorderResult(success=False, message=persist_error)
        if not loaded:
            return ReorderResult(success=False, message=self.error)
        return ReorderResult(success=True)
