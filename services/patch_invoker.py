"""
Remote patch invoker.

Sends a reconciled payload and reports the outcome as a value instead
of an exception, so an editing surface can show the message and keep
its edit session for a retry.
"""

from dataclasses import dataclass
from typing import Awaitable, Callable, Optional
import structlog

from models.base import RecordId
from services.entity_service import RemoteEntityService
from utils.text_utils import normalize_error_message

logger = structlog.get_logger(__name__)

DEFAULT_FAILURE_MESSAGE = "Failed to save changes"

OnComplete = Callable[[dict], Awaitable[None]]


@dataclass
class PatchResult:
    """Outcome of one apply() call."""
    success: bool
    message: Optional[str] = None
    record: Optional[dict] = None


class PatchInvoker:
    """
    Applies partial updates through a remote entity service.

    The invoker never touches an edit session: on failure nothing was
    applied locally, so there is nothing to roll back.
    """

    def __init__(self, service: RemoteEntityService, failure_message: str = DEFAULT_FAILURE_MESSAGE):
        self.service = service
        self.failure_message = failure_message

    async def apply(
        self,
        record_id: RecordId,
        payload: dict,
        on_complete: Optional[OnComplete] = None
    ) -> PatchResult:
        """
        Send payload, then run on_complete with the updated record.

        Args:
            record_id: Record to update
            payload: Reconciled partial update
            on_complete: Async callback, normally a re-fetch and re-render

        Returns:
            PatchResult; success=False carries a displayable message
        """
        if not payload:
            logger.info("patch_skipped_empty_payload", record_id=record_id)
            return PatchResult(success=True, record=None)

        try:
            record = await self.service.update(record_id, payload)
        except Exception as e:
            message = normalize_error_message(e, self.failure_message)
            logger.error(
                "patch_failed",
                resource=self.service.resource,
                record_id=record_id,
                error=message,
                error_type=type(e).__name__
            )
            return PatchResult(success=False, message=message)

        logger.info(
            "patch_applied",
            resource=self.service.resource,
            record_id=record_id,
            fields=list(payload.keys())
        )

        if on_complete is not None:
            try:
                await on_complete(record)
            except Exception as e:
                message = normalize_error_message(e, self.failure_message)
                logger.error(
                    "patch_refresh_failed",
                    record_id=record_id,
                    error=message,
                    error_type=type(e).__name__
                )
                return PatchResult(success=False, message=message, record=record)

        return PatchResult(success=True, record=record)
