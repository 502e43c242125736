"""
Catalog listings (backend table `service`).
"""

from typing import Any

from loguru import logger

from storefront.models import Listing, MultipartPayload
from storefront.normalizers import listing_from_remote, listing_to_remote
from storefront.resources.base import BaseResource
from storefront.services.errors import RemoteError
from storefront.utils import log_operation

ACTIVE_STATUS = "active"


class ListingsResource(BaseResource):
    """
    Listings facade.

    Public catalog reads ask the backend for available, active records only;
    admin views pass include_all=True. Filtered and unfiltered reads are
    different paths and therefore different cache entries.
    """

    @property
    def path(self) -> str:
        return "/service"

    def list_path(self, include_all: bool = False, limit: int | None = None) -> str:
        """Collection path with the catalog query constraints."""
        params = []
        if not include_all:
            params.append("available=true")
            params.append(f"status={ACTIVE_STATUS}")
        if isinstance(limit, int) and not isinstance(limit, bool) and limit > 0:
            params.append(f"limit={limit}")
        return f"{self.path}?{'&'.join(params)}" if params else self.path

    @log_operation
    async def list_all(
        self,
        include_all: bool = False,
        limit: int | None = None,
        ttl: int | None = None,
    ) -> list[Listing]:
        """
        Fetch listings.

        Args:
            include_all: Also return unavailable/inactive listings (admin)
            limit: Optional positive cap, e.g. for featured lists
            ttl: Cache TTL in milliseconds

        Returns:
            List of Listing objects
        """
        path = self.list_path(include_all, limit)
        records = await self._cached_list(path, ttl)
        listings = [item for item in map(listing_from_remote, records) if item is not None]

        if not include_all:
            # The backend may ignore unknown filters; enforce them here too
            listings = [item for item in listings if _is_active(item)]

        logger.info(f"Fetched {len(listings)} listings from {path}")
        return listings

    @log_operation
    async def get_by_id(self, listing_id: Any) -> Listing | None:
        """Always a fresh read: detail views need current data."""
        data = await self.client.get(self.item_path(listing_id))
        return listing_from_remote(data)

    @log_operation
    async def create(self, payload: MultipartPayload | Listing | dict[str, Any]) -> Listing | None:
        """
        Create a listing.

        A MultipartPayload (file upload flow) is sent as-is; anything else is
        normalized to the backend shape and sent as JSON.
        """
        try:
            if isinstance(payload, MultipartPayload):
                data = await self.client.post_multipart(
                    self.path, data=payload.fields, files=payload.files or None
                )
            else:
                data = await self.client.post(self.path, json=listing_to_remote(payload))
        except RemoteError as e:
            self.raise_if_duplicate(e)
            raise
        finally:
            self.invalidate()

        listing = listing_from_remote(data)
        logger.info(f"Listing created: {listing.id if listing else None}")
        return listing

    @log_operation
    async def update(self, listing_id: Any, payload: Listing | dict[str, Any]) -> Listing | None:
        """Partial update: only the supplied fields are sent."""
        try:
            data = await self.client.patch(
                self.item_path(listing_id), json=listing_to_remote(payload, partial=True)
            )
        except RemoteError as e:
            self.raise_if_duplicate(e)
            raise
        finally:
            self.invalidate()
        return listing_from_remote(data)

    @log_operation
    async def delete(self, listing_id: Any) -> None:
        try:
            await self.client.delete(self.item_path(listing_id))
        finally:
            self.invalidate()
        logger.info(f"Listing deleted: {listing_id}")


def _is_active(listing: Listing) -> bool:
    return listing.disponible and listing.estado.lower() in (ACTIVE_STATUS, "")
