"""
Transport - HTTP access to the two backend services (data and auth).

Both services share one CredentialSession; the bearer header is read from it
on every request. Failures are logged and classified into the ServiceError
family before they leave this module.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

import httpx
from loguru import logger

from storefront.services.errors import (
    NetworkError,
    RateLimitError,
    RemoteError,
    RequestTimeoutError,
)
from storefront.services.session import CredentialSession
from storefront.settings import Settings, global_settings


class Service(str, Enum):
    """Backend services reachable through the transport."""

    DATA = "data"
    AUTH = "auth"


@dataclass
class ServiceConfig:
    """Configuration for a specific service."""

    service_id: str
    base_url: str
    timeout: float = 15.0
    upload_timeout: float = 30.0


class Transport:
    """
    Issues authenticated requests against the data and auth services.

    Usage:
        transport = Transport(CredentialSession())
        services = await transport.request(Service.DATA, "GET", "/service")

        # Multipart upload, the boundary header is computed by httpx
        meta = await transport.upload(
            Service.DATA, "/file", files={"file": ("a.png", raw, "image/png")}
        )
    """

    def __init__(
        self,
        session: CredentialSession,
        settings: Settings | None = None,
        http_transport: httpx.AsyncBaseTransport | None = None,
    ):
        settings = settings or global_settings
        self._session = session
        self._http_transport = http_transport
        self._services: dict[Service, ServiceConfig] = {
            Service.DATA: ServiceConfig(
                service_id=Service.DATA.value,
                base_url=settings.store_api_base,
                timeout=settings.request_timeout,
                upload_timeout=settings.upload_timeout,
            ),
            Service.AUTH: ServiceConfig(
                service_id=Service.AUTH.value,
                base_url=settings.auth_api_base,
                timeout=settings.request_timeout,
                upload_timeout=settings.upload_timeout,
            ),
        }
        self._http_clients: dict[Service, httpx.AsyncClient] = {}

    @property
    def session(self) -> CredentialSession:
        return self._session

    def base_url(self, service: Service) -> str:
        return self._services[service].base_url

    async def _get_http_client(self, service: Service) -> httpx.AsyncClient:
        """Get or create the HTTP client for a service."""
        client = self._http_clients.get(service)
        if client is None:
            config = self._services[service]
            client = httpx.AsyncClient(
                base_url=config.base_url,
                timeout=httpx.Timeout(config.timeout),
                headers={"Accept": "application/json"},
                transport=self._http_transport,
            )
            self._http_clients[service] = client
        return client

    async def request(
        self,
        service: Service,
        method: str,
        path: str,
        *,
        json: Any = None,
        data: dict[str, Any] | None = None,
        files: Any = None,
        params: dict[str, Any] | None = None,
        timeout: float | None = None,
    ) -> Any:
        """
        Make a single HTTP request.

        Args:
            service: Which backend to call
            method: HTTP method
            path: Path relative to the service base URL, query string allowed
            json: JSON body (sent with Content-Type: application/json)
            data: Form fields for a multipart body
            files: Files for a multipart body
            params: Extra query parameters
            timeout: Override request timeout

        Returns:
            Decoded JSON body, raw text for non-JSON bodies, None when empty

        Raises:
            RequestTimeoutError: If the request times out
            NetworkError: If no response was received
            RateLimitError: On HTTP 429
            RemoteError: On any other status >= 400
        """
        config = self._services[service]
        req_timeout = timeout or config.timeout
        method = method.upper()
        client = await self._get_http_client(service)

        try:
            response = await client.request(
                method=method,
                url=path,
                params=params,
                json=json,
                data=data,
                files=files,
                headers=self._session.auth_headers(),
                timeout=req_timeout,
            )

        except httpx.TimeoutException as e:
            logger.warning(f"{config.service_id} {method} {path} timed out after {req_timeout}s")
            raise RequestTimeoutError(config.service_id, req_timeout) from e

        except httpx.ConnectError as e:
            logger.warning(f"{config.service_id} {method} {path} connection failed: {e}")
            raise NetworkError(str(e), service_id=config.service_id, kind="connect") from e

        except httpx.RequestError as e:
            logger.warning(f"{config.service_id} {method} {path} request failed: {e}")
            raise NetworkError(str(e), service_id=config.service_id) from e

        body = _decode_body(response)
        if response.status_code >= 400:
            self._raise_for_status(service, method, path, response, body)
        return body

    async def upload(
        self,
        service: Service,
        path: str,
        files: Any,
        data: dict[str, Any] | None = None,
    ) -> Any:
        """POST a multipart body with the longer upload timeout."""
        return await self.request(
            service,
            "POST",
            path,
            data=data,
            files=files,
            timeout=self._services[service].upload_timeout,
        )

    def _raise_for_status(
        self,
        service: Service,
        method: str,
        path: str,
        response: httpx.Response,
        body: Any,
    ) -> None:
        status = response.status_code
        service_id = self._services[service].service_id
        content_type = response.headers.get("content-type", "")
        logger.error(
            f"{service_id} API error: {method} {path} status={status} "
            f"content-type={content_type} body={str(body)[:200]}"
        )

        if status == 429:
            raise RateLimitError(
                body,
                service_id=service_id,
                retry_after=_parse_retry_after(response.headers.get("retry-after")),
            )

        # Expired token: drop it so later calls go out anonymous
        if status == 401 and service is Service.DATA and self._session.has_credential():
            logger.warning("Received 401 with a credential set, clearing expired token")
            self._session.clear_credential()

        raise RemoteError(status, body, service_id=service_id)

    async def close(self) -> None:
        """Close the HTTP clients."""
        for client in self._http_clients.values():
            await client.aclose()
        self._http_clients.clear()
        logger.debug("Transport closed")


def _decode_body(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


def _parse_retry_after(value: str | None) -> float | None:
    if not value:
        return None
    try:
        return float(value)
    except ValueError:
        return None
