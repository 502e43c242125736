"""
Base resource facade.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

from loguru import logger

from storefront.services.client import ApiClient, get_api_client, ttl_from_ms
from storefront.services.errors import ConflictError, RemoteError

DUPLICATE_MARKERS = ("duplicate", "already exists", "already in use")


class BaseResource(ABC):
    """
    Abstract base class for the per-entity facades.

    All facades should:
    - Use ApiClient for requests (cached GETs, 429 retry, shared credential)
    - Return domain records built by storefront.normalizers
    - Invalidate their cached list reads after every write
    """

    def __init__(self, client: ApiClient | None = None):
        self.client = client or get_api_client()

    @property
    @abstractmethod
    def path(self) -> str:
        """Collection endpoint, e.g. `/service`."""
        ...

    def item_path(self, record_id: Any) -> str:
        return f"{self.path}/{record_id}"

    async def _cached_list(self, path: str, ttl_ms: int | None = None) -> list[Any]:
        """Cached GET of a collection, always returned as a list of records."""
        data = await self.client.cached_get(path, ttl_from_ms(ttl_ms))
        return _as_records(data, path)

    def invalidate(self) -> int:
        """Drop every cached read of this collection."""
        return self.client.invalidate(self.path)

    @staticmethod
    def raise_if_duplicate(error: RemoteError) -> None:
        """Translate duplicate-record responses into ConflictError."""
        message = error.server_message.lower()
        if error.status in (409, 422) or any(marker in message for marker in DUPLICATE_MARKERS):
            raise ConflictError(
                "Resource already exists",
                status=error.status,
                body=error.body,
                service_id=error.service_id,
            ) from error


def _as_records(data: Any, path: str) -> list[Any]:
    if isinstance(data, list):
        return data
    # Paged responses wrap the records
    if isinstance(data, Mapping) and isinstance(data.get("items"), list):
        return data["items"]
    if data is not None:
        logger.warning(f"GET {path} returned {type(data).__name__}, expected a list")
    return []
