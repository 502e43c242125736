import functools
import inspect
from collections.abc import Mapping
from typing import Any

from loguru import logger

from storefront.models import MultipartPayload, User

SECRET_KEYS = frozenset(
    {"password", "password_hash", "clave_hash", "token", "authToken", "accessToken", "access_token"}
)


def redact(value: Any) -> Any:
    """Copy of a payload safe to log: secret fields replaced, files summarized."""
    if isinstance(value, MultipartPayload):
        return redact(value.preview())
    if isinstance(value, User):
        return redact(value.model_dump(exclude={"password", "password_hash"}))
    if isinstance(value, Mapping):
        return {
            key: "[hidden]" if key in SECRET_KEYS else redact(item)
            for key, item in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [redact(item) for item in value]
    return value


def strip_secrets(user: User | Mapping[str, Any]) -> User | dict[str, Any]:
    """User snapshot without credentials, for client-side persistence."""
    if isinstance(user, User):
        return user.without_secrets()
    return {key: item for key, item in user.items() if key not in ("password", "password_hash", "clave_hash")}


def log_operation(func):
    """
    A decorator for async facade operations that logs entry, exit, and failures.

    Features:
    - Logs the operation name and its (redacted) parameters before execution
    - Logs the exception type and message on failure and re-raises it unchanged
    - Logs completion after a successful call
    """

    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        sig = inspect.signature(func)
        bound_args = sig.bind(*args, **kwargs)
        bound_args.apply_defaults()
        params = {k: v for k, v in bound_args.arguments.items() if k != "self"}
        name = func.__qualname__

        logger.debug(f"Entering {name} with params: {redact(params)}")
        try:
            result = await func(*args, **kwargs)
        except Exception as e:
            logger.error(f"{name} failed: {type(e).__name__}: {e}")
            raise
        logger.debug(f"{name} done")
        return result

    return wrapper
