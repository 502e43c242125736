"""
CredentialSession - the bearer credential shared by every backend service.

The data and auth clients both read the Authorization header from the same
session at send time, so setting or clearing the token applies to all
subsequent requests on both services.
"""

from loguru import logger


class CredentialSession:
    """Holds the current bearer token. `set_credential` and `clear_credential` are the only mutators."""

    def __init__(self, token: str | None = None):
        self._token = token or None

    @property
    def token(self) -> str | None:
        return self._token

    def has_credential(self) -> bool:
        return self._token is not None

    def set_credential(self, token: str) -> None:
        if not token:
            return
        self._token = token
        logger.info("Bearer credential configured for data and auth services")

    def clear_credential(self) -> None:
        if self._token is not None:
            logger.info("Bearer credential cleared")
        self._token = None

    def auth_headers(self) -> dict[str, str]:
        """Headers to attach to an outgoing request."""
        if self._token is None:
            return {}
        return {"Authorization": f"Bearer {self._token}"}
