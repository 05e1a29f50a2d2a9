"""
Async HTTP client for the export-readiness backend.

One httpx.AsyncClient per ApiClient. The bearer token is never read
from ambient state: every call receives a SessionContext.
"""

from dataclasses import dataclass
from typing import Any, Optional

import httpx
import structlog

from config import settings
from exceptions import ApiRequestError, ForbiddenError, RecordNotFoundError

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class SessionContext:
    """Authentication context consumed (never produced) by the core."""
    token: Optional[str] = None

    @classmethod
    def from_settings(cls) -> "SessionContext":
        return cls(token=settings.api_token)

    def headers(self) -> dict[str, str]:
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}


class ApiClient:
    """
    Thin JSON client over httpx.AsyncClient.

    Usage:
        async with ApiClient() as api:
            product = await api.get("/products/7/", session)
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout or settings.api_timeout_seconds,
            headers={"Content-Type": "application/json"},
            transport=transport,
        )

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
        return False  # Don't suppress exceptions

    async def aclose(self):
        await self.client.aclose()

    # ===================
    # VERBS
    # ===================

    async def get(self, path: str, session: SessionContext, params: Optional[dict] = None) -> Any:
        return await self._request("GET", path, session, params=params)

    async def post(self, path: str, data: dict, session: SessionContext) -> Any:
        return await self._request("POST", path, session, payload=data)

    async def patch(self, path: str, data: dict, session: SessionContext) -> Any:
        return await self._request("PATCH", path, session, payload=data)

    async def put(self, path: str, data: dict, session: SessionContext) -> Any:
        return await self._request("PUT", path, session, payload=data)

    async def delete(self, path: str, session: SessionContext) -> None:
        await self._request("DELETE", path, session)

    # ===================
    # INTERNALS
    # ===================

    async def _request(
        self,
        method: str,
        path: str,
        session: SessionContext,
        payload: Optional[dict] = None,
        params: Optional[dict] = None
    ) -> Any:
        logger.debug("api_request", method=method, path=path, authenticated=bool(session.token))

        try:
            response = await self.client.request(
                method,
                path,
                json=payload,
                params=params,
                headers=session.headers(),
            )
        except httpx.HTTPError as e:
            logger.error(
                "api_request_failed",
                method=method,
                path=path,
                error=str(e),
                error_type=type(e).__name__
            )
            raise ApiRequestError(method, path, message=f"Could not reach backend: {e}") from e

        return self._handle_response(response, method, path)

    def _handle_response(self, response: httpx.Response, method: str, path: str) -> Any:
        if response.status_code >= 400:
            body = self._decode(response)
            logger.warning(
                "api_error_response",
                method=method,
                path=path,
                status_code=response.status_code
            )
            if response.status_code == 404:
                raise RecordNotFoundError(method, path, body=body)
            if response.status_code in (401, 403):
                raise ForbiddenError(method, path, status_code=response.status_code, body=body)
            raise ApiRequestError(method, path, status_code=response.status_code, body=body)

        if response.status_code == 204 or not response.content:
            return {}
        return self._decode(response)

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError:
            return response.text[:500] if response.text else None
