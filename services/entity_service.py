"""
Remote entity services.

Each service wraps one backend resource (products, buyer requests,
educational modules and articles) with get / update / delete / list.
Responses are unwrapped here so callers always see a plain record
dict or a ListResult.
"""

from typing import Optional
import structlog

from integrations.api_client import ApiClient, SessionContext
from models.base import RecordId
from models.listing import ListResult
from utils.response_utils import normalize_list_response, unwrap_record

logger = structlog.get_logger(__name__)


class RemoteEntityService:
    """
    CRUD access to one backend resource.

    Update is a merge: the backend sets only the keys present in the
    payload. Whether that travels as PATCH or PUT depends on the resource.
    """

    def __init__(
        self,
        api: ApiClient,
        session: SessionContext,
        resource: str,
        endpoint: str,
        update_method: str = "PATCH"
    ):
        self.api = api
        self.session = session
        self.resource = resource
        self.endpoint = endpoint if endpoint.endswith("/") else endpoint + "/"
        self.update_method = update_method

    def detail_path(self, record_id: RecordId) -> str:
        return f"{self.endpoint}{record_id}/"

    # ===================
    # READ OPERATIONS
    # ===================

    async def get(self, record_id: RecordId) -> dict:
        """
        Fetch one record.

        Raises:
            RecordNotFoundError: Backend returned 404
            ForbiddenError: Backend returned 401/403
            ApiRequestError: Any other failure
        """
        logger.debug("getting_record", resource=self.resource, record_id=record_id)

        response = await self.api.get(self.detail_path(record_id), self.session)
        return unwrap_record(response)

    async def list(self, params: Optional[dict] = None) -> ListResult:
        """
        Fetch a list of records.

        Args:
            params: Query parameters (page, limit, filters)

        Returns:
            ListResult (empty if the response shape is unknown)
        """
        logger.debug("listing_records", resource=self.resource, params=params)

        response = await self.api.get(self.endpoint, self.session, params=params)
        result = normalize_list_response(response)

        logger.info(
            "records_listed",
            resource=self.resource,
            count=len(result.items),
            total=result.total
        )
        return result

    # ===================
    # WRITE OPERATIONS
    # ===================

    async def update(self, record_id: RecordId, payload: dict) -> dict:
        """
        Send a partial update.

        Args:
            record_id: Record id
            payload: Only the keys to change

        Returns:
            The updated record as returned by the backend ({} if none)
        """
        logger.info(
            "updating_record",
            resource=self.resource,
            record_id=record_id,
            fields=list(payload.keys())
        )

        path = self.detail_path(record_id)
        if self.update_method == "PUT":
            response = await self.api.put(path, payload, self.session)
        else:
            response = await self.api.patch(path, payload, self.session)

        return unwrap_record(response)

    async def delete(self, record_id: RecordId) -> None:
        """Delete one record."""
        logger.info("deleting_record", resource=self.resource, record_id=record_id)

        await self.api.delete(self.detail_path(record_id), self.session)

        logger.info("record_deleted", resource=self.resource, record_id=record_id)


class ProductService(RemoteEntityService):
    """Products; updated with PATCH."""

    def __init__(self, api: ApiClient, session: SessionContext):
        super().__init__(api, session, resource="product", endpoint="/products/")


class BuyerRequestService(RemoteEntityService):
    """Buyer requests."""

    def __init__(self, api: ApiClient, session: SessionContext):
        super().__init__(
            api, session,
            resource="buyer_request",
            endpoint="/buyer-requests/",
            update_method="PUT"
        )


class EducationalModuleService(RemoteEntityService):
    """Educational modules."""

    def __init__(self, api: ApiClient, session: SessionContext):
        super().__init__(
            api, session,
            resource="educational_module",
            endpoint="/educational/modules/",
            update_method="PUT"
        )


class EducationalArticleService(RemoteEntityService):
    """Educational articles; listable per module."""

    def __init__(self, api: ApiClient, session: SessionContext):
        super().__init__(
            api, session,
            resource="educational_article",
            endpoint="/educational/articles/",
            update_method="PUT"
        )

    async def list_for_module(self, module_id: RecordId, limit: int = 100) -> ListResult:
        return await self.list({"module_id": module_id, "limit": limit})
