"""
Service layer infrastructure - access to the storefront backend.

Provides:
- Transport: HTTP access to the data and auth services
- RetryPolicy: bounded exponential backoff for rate-limited GETs
- ResponseCache: TTL cache with single-flight deduplication
- CredentialSession: bearer token shared by both services
- ApiClient: unified client combining all of the above
"""

from storefront.services.errors import (
    ServiceError,
    NetworkError,
    RequestTimeoutError,
    RemoteError,
    RateLimitError,
    ValidationError,
    ConflictError,
    UploadError,
    SignupVerificationError,
)
from storefront.services.session import CredentialSession
from storefront.services.transport import Service, ServiceConfig, Transport
from storefront.services.retry import RetryPolicy
from storefront.services.cache import ResponseCache, CacheEntry, CacheStats
from storefront.services.client import ApiClient, get_api_client, close_api_client

__all__ = [
    # Errors
    "ServiceError",
    "NetworkError",
    "RequestTimeoutError",
    "RemoteError",
    "RateLimitError",
    "ValidationError",
    "ConflictError",
    "UploadError",
    "SignupVerificationError",
    # Transport
    "CredentialSession",
    "Service",
    "ServiceConfig",
    "Transport",
    # Retry
    "RetryPolicy",
    # Cache
    "ResponseCache",
    "CacheEntry",
    "CacheStats",
    # Client
    "ApiClient",
    "get_api_client",
    "close_api_client",
]
