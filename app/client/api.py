"""
Async HTTP client for the listings REST API.
Used by the form controller, browser and viewer.
"""

from typing import Any, Dict, List, Optional
import httpx
import logging

from app.config import settings

logger = logging.getLogger(__name__)


class ListingsAPIError(Exception):
    """Request to the listings API failed or returned an error status."""

    def __init__(self, message: str, status_code: Optional[int] = None, payload: Any = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload


class ListingNotFound(ListingsAPIError):
    """The API answered 404 for a listing."""


class ListingsAPIClient:
    """
    Thin async wrapper over ``/api/listings``.

    Documents are exchanged in wire form (camelCase keys, ``_id``).
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.base_url = (base_url or settings.client_base_url).rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout if timeout is not None else settings.client_timeout,
            transport=transport,
        )
        self._path = f"{settings.api_prefix}/listings"

    async def __aenter__(self) -> "ListingsAPIClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def create(self, document: Dict[str, Any]) -> Dict[str, Any]:
        """Create a listing and return it with its assigned ``_id``."""
        return await self._request("POST", self._path, json=document)

    async def list(self, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        return await self._request("GET", self._path, params=params or None)

    async def get(self, listing_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"{self._path}/{listing_id}")

    async def update(self, listing_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        """Overwrite the given top-level fields of a listing."""
        return await self._request("PUT", f"{self._path}/{listing_id}", json=fields)

    async def delete(self, listing_id: str) -> bool:
        result = await self._request("DELETE", f"{self._path}/{listing_id}")
        return bool(result.get("success"))

    async def _request(self, method: str, url: str, **kwargs) -> Any:
        try:
            response = await self._client.request(method, url, **kwargs)
        except (httpx.HTTPError, TypeError, ValueError) as e:
            # TypeError/ValueError come from encoding a body that is not JSON-serializable
            raise ListingsAPIError(f"{method} {url} failed: {e}") from e

        logger.debug(f"{method} {url} -> {response.status_code}")
        if response.status_code >= 400:
            payload = self._error_payload(response)
            message = self._error_message(payload) or response.reason_phrase
            if response.status_code == 404:
                raise ListingNotFound(message, status_code=404, payload=payload)
            raise ListingsAPIError(message, status_code=response.status_code, payload=payload)

        try:
            return response.json()
        except ValueError as e:
            raise ListingsAPIError(
                f"{method} {url} returned a non-JSON body", status_code=response.status_code
            ) from e

    @staticmethod
    def _error_payload(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError:
            return response.text

    @staticmethod
    def _error_message(payload: Any) -> Optional[str]:
        if isinstance(payload, dict):
            error = payload.get("error")
            if isinstance(error, dict):
                return error.get("message")
            if isinstance(error, str):
                return error
        return None
