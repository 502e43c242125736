"""
Service layer exceptions.

Hierarchy:
    ServiceError
    ├── NetworkError            no response received
    │   └── RequestTimeoutError
    ├── RemoteError             response with status >= 400
    │   └── RateLimitError      status 429
    ├── ValidationError         rejected client-side, nothing was sent
    ├── ConflictError           duplicate resource (409/422 or "duplicate" message)
    └── UploadError             upload succeeded but no public URL came back
"""

from typing import Any


class ServiceError(Exception):
    """Base exception for service layer errors."""

    def __init__(self, message: str, service_id: str | None = None):
        self.service_id = service_id
        super().__init__(message)


class NetworkError(ServiceError):
    """The remote service could not be reached."""

    def __init__(
        self,
        message: str,
        service_id: str | None = None,
        kind: str = "other",
    ):
        self.kind = kind  # 'timeout' | 'connect' | 'other'
        super().__init__(message, service_id=service_id)


class RequestTimeoutError(NetworkError):
    """Request timed out."""

    def __init__(self, service_id: str, timeout: float):
        self.timeout = timeout
        super().__init__(
            f"Request to service '{service_id}' timed out after {timeout}s",
            service_id=service_id,
            kind="timeout",
        )


class RemoteError(ServiceError):
    """The remote service answered with an error status."""

    def __init__(
        self,
        status: int,
        body: Any = None,
        service_id: str | None = None,
        message: str | None = None,
    ):
        self.status = status
        self.body = body
        super().__init__(
            message or f"HTTP {status}: {_preview(body)}",
            service_id=service_id,
        )

    @property
    def server_message(self) -> str:
        """The `message` field of the error body, if the backend sent one."""
        if isinstance(self.body, dict):
            return str(self.body.get("message") or "")
        if isinstance(self.body, str):
            return self.body
        return ""


class RateLimitError(RemoteError):
    """Rate limit exceeded."""

    def __init__(
        self,
        body: Any = None,
        service_id: str | None = None,
        retry_after: float | None = None,
    ):
        self.retry_after = retry_after
        msg = f"Rate limit exceeded for service '{service_id}'"
        if retry_after:
            msg += f", retry after {retry_after}s"
        super().__init__(429, body, service_id=service_id, message=msg)


class ValidationError(ServiceError):
    """Payload rejected before any request was issued."""

    pass


class ConflictError(ServiceError):
    """The resource already exists."""

    def __init__(
        self,
        message: str = "Resource already exists",
        status: int | None = None,
        body: Any = None,
        service_id: str | None = None,
    ):
        self.status = status
        self.body = body
        super().__init__(message, service_id=service_id)


class UploadError(ServiceError):
    """File upload did not produce a public URL."""

    pass


class SignupVerificationError(ServiceError):
    """Signup returned but the account record is missing or incomplete."""

    pass


def _preview(body: Any, limit: int = 200) -> str:
    text = body if isinstance(body, str) else repr(body)
    return text[:limit]
