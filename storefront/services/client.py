"""
ApiClient - Unified async client for the storefront backend.

Combines:
- Transport for the data and auth services
- RetryPolicy for rate-limited GETs
- ResponseCache for cached, deduplicated reads
- CredentialSession shared by both services
"""

import asyncio
import json
import time
from collections.abc import Mapping
from datetime import timedelta
from typing import Any, Awaitable, Callable

import httpx
from loguru import logger

from storefront.services.cache import ResponseCache
from storefront.services.errors import ServiceError
from storefront.services.retry import RetryPolicy
from storefront.services.session import CredentialSession
from storefront.services.transport import Service, Transport
from storefront.settings import Settings, global_settings


def ttl_from_ms(ttl_ms: int | float | None) -> timedelta | None:
    """Convert a millisecond TTL to a timedelta (None keeps the cache default)."""
    if ttl_ms is None:
        return None
    return timedelta(milliseconds=ttl_ms)


def form_fields(fields: dict[str, Any]) -> dict[str, str]:
    """
    Multipart form values as strings; None fields are left out.

    Objects and lists are sent as JSON text.
    """
    out: dict[str, str] = {}
    for key, value in fields.items():
        if value is None:
            continue
        if isinstance(value, bool):
            out[key] = "true" if value else "false"
        elif isinstance(value, (Mapping, list, tuple)):
            out[key] = json.dumps(value, ensure_ascii=False, default=str)
        else:
            out[key] = value if isinstance(value, str) else str(value)
    return out


class ApiClient:
    """
    Backend client with caching, 429 retry, and a shared bearer credential.

    Usage:
        async with ApiClient() as client:
            services = await client.cached_get("/service?available=true", ttl=timedelta(minutes=5))
            created = await client.post("/blog", json={"title": "..."})
            client.invalidate("/blog")
    """

    def __init__(
        self,
        settings: Settings | None = None,
        session: CredentialSession | None = None,
        http_transport: httpx.AsyncBaseTransport | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.settings = settings or global_settings
        self.session = session or CredentialSession()
        self.sleep = sleep
        self.transport = Transport(self.session, self.settings, http_transport)
        self.retry = RetryPolicy(
            max_retries=self.settings.retry_max_retries,
            base_delay=self.settings.retry_base_delay,
            sleep=sleep,
        )
        self.cache = ResponseCache(
            default_ttl=timedelta(milliseconds=self.settings.cache_ttl_ms),
            clock=clock,
            debug=self.settings.cache_debug,
        )

    async def request(
        self,
        method: str,
        path: str,
        *,
        service: Service = Service.DATA,
        json: Any = None,
        data: dict[str, Any] | None = None,
        files: Any = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Uncached request through the retry policy."""
        method = method.upper()

        async def do_request() -> Any:
            return await self.transport.request(
                service,
                method,
                path,
                json=json,
                data=data,
                files=files,
                params=params,
            )

        return await self.retry.run(method, do_request, label=path)

    async def get(self, path: str, service: Service = Service.DATA) -> Any:
        return await self.request("GET", path, service=service)

    async def cached_get(
        self,
        path: str,
        ttl: timedelta | None = None,
        service: Service = Service.DATA,
    ) -> Any:
        """GET served from the response cache when fresh."""
        key = self.cache.generate_key(self.transport.base_url(service), path)
        return await self.cache.get(key, lambda: self.get(path, service=service), ttl)

    async def post(
        self,
        path: str,
        json: Any = None,
        service: Service = Service.DATA,
    ) -> Any:
        return await self.request("POST", path, service=service, json=json)

    async def patch(
        self,
        path: str,
        json: Any = None,
        service: Service = Service.DATA,
    ) -> Any:
        return await self.request("PATCH", path, service=service, json=json)

    async def delete(self, path: str, service: Service = Service.DATA) -> Any:
        return await self.request("DELETE", path, service=service)

    async def post_multipart(
        self,
        path: str,
        data: dict[str, Any] | None = None,
        files: Any = None,
        service: Service = Service.DATA,
    ) -> Any:
        """
        POST a multipart body; Content-Type and boundary are left to httpx.

        A body without files still goes out as multipart: its fields are sent
        as filename-less parts.
        """
        fields = form_fields(data or {})
        if not files:
            files = {name: (None, value.encode()) for name, value in fields.items()}
            fields = {}
        return await self.transport.upload(service, path, files=files, data=fields or None)

    def invalidate(self, path_prefix: str, service: Service = Service.DATA) -> int:
        """Drop cached reads under a resource path after a write."""
        return self.cache.invalidate(path_prefix, base_url=self.transport.base_url(service))

    # Credential management

    def set_credential(self, token: str) -> None:
        self.session.set_credential(token)

    def clear_credential(self) -> None:
        self.session.clear_credential()

    def has_credential(self) -> bool:
        return self.session.has_credential()

    def current_token(self) -> str | None:
        return self.session.token

    # Health and status methods

    async def check_health(self) -> bool:
        """True when the data service answers GET /health with a 2xx."""
        try:
            await self.transport.request(Service.DATA, "GET", "/health")
            return True
        except ServiceError as e:
            logger.warning(f"Health check failed: {e}")
            return False

    def get_health_status(self) -> dict[str, Any]:
        """Get cache and credential status."""
        return {
            "cache": self.cache.get_stats().to_dict(),
            "has_credential": self.has_credential(),
            "data_base_url": self.transport.base_url(Service.DATA),
            "auth_base_url": self.transport.base_url(Service.AUTH),
        }

    async def close(self) -> None:
        """Close the HTTP clients and drop cached reads."""
        await self.transport.close()
        self.cache.clear()
        logger.debug("ApiClient closed")

    async def __aenter__(self) -> "ApiClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()


# Global client instance
_global_client: ApiClient | None = None


def get_api_client() -> ApiClient:
    """Get the global API client instance."""
    global _global_client
    if _global_client is None:
        _global_client = ApiClient()
    return _global_client


async def close_api_client() -> None:
    """Close the global API client."""
    global _global_client
    if _global_client:
        await _global_client.close()
        _global_client = None
