"""
Total resolvers for the ambiguous field families the backend returns.

Every function here accepts any input and returns a value; none of them
raise.
"""

import json
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

# Keys tried, in order, on an image/file object
IMAGE_URL_KEYS = ("url", "file.url", "file_url", "fileUrl")

# Keys the auth service may use for the bearer token
TOKEN_KEYS = ("authToken", "token", "accessToken", "access_token")

CATEGORY_NAME_KEYS = ("name", "nombre", "category")


def resolve_image(raw: Any) -> str:
    """
    Resolve an image field (string | object | array | None) to a URL string.

    - None -> ""
    - str -> stripped string
    - list/tuple -> first element, resolved as a string or object
    - mapping -> first non-empty of url, file.url, file_url, fileUrl
    - anything else -> ""
    """
    if isinstance(raw, (list, tuple)):
        if not raw:
            return ""
        return _resolve_single(raw[0])
    return _resolve_single(raw)


def _resolve_single(raw: Any) -> str:
    if isinstance(raw, str):
        return raw.strip()
    if isinstance(raw, Mapping):
        for key in IMAGE_URL_KEYS:
            value = _dotted_get(raw, key)
            if isinstance(value, str) and value.strip():
                return value.strip()
    return ""


def _dotted_get(data: Mapping, path: str) -> Any:
    current: Any = data
    for part in path.split("."):
        if not isinstance(current, Mapping):
            return None
        current = current.get(part)
    return current


def pick_image_field(record: Mapping, fields: tuple[str, ...]) -> Any:
    """First of `fields` present on the record with a non-None value."""
    for name in fields:
        value = record.get(name)
        if value is not None:
            return value
    return None


def normalize_category(raw: Any) -> str:
    """
    Normalize a category (string | number | object) to its display string.

    Idempotent: a string comes back unchanged.
    """
    if raw is None:
        return ""
    if isinstance(raw, str):
        return raw
    if isinstance(raw, bool):
        return "true" if raw else "false"
    if isinstance(raw, int):
        return str(raw)
    if isinstance(raw, float):
        return str(int(raw)) if raw.is_integer() else str(raw)
    if isinstance(raw, Mapping):
        for key in CATEGORY_NAME_KEYS:
            value = raw.get(key)
            if value is not None and value != "":
                return value if isinstance(value, str) else str(value)
        if raw.get("id") is not None:
            return str(raw["id"])
        return json.dumps(dict(raw), ensure_ascii=False, default=str)
    return str(raw)


def extract_token(raw: Any) -> str | None:
    """
    Find a bearer token in an auth response.

    Checked shapes: top-level field, nested under `data`, first array element.
    """
    candidates: list[Any] = []
    if isinstance(raw, Mapping):
        candidates.append(raw)
        if isinstance(raw.get("data"), Mapping):
            candidates.append(raw["data"])
    elif isinstance(raw, (list, tuple)) and raw:
        candidates.append(raw[0])

    for candidate in candidates:
        if not isinstance(candidate, Mapping):
            continue
        for key in TOKEN_KEYS:
            value = candidate.get(key)
            if isinstance(value, str) and value:
                return value
    return None


def extract_upload_url(raw: Any) -> str | None:
    """Public URL from a file-storage response (object or array of objects)."""
    if not isinstance(raw, (Mapping, list, tuple)):
        return None
    return resolve_image(raw) or None


def to_text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def to_number(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def to_int(value: Any, default: int = 0) -> int:
    if value is None or isinstance(value, bool):
        return default
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return default


def to_record_id(value: Any) -> int | str | None:
    if value is None or isinstance(value, (int, str)):
        return value
    return str(value)


def as_mapping(payload: Any) -> dict[str, Any]:
    """Plain dict from a domain model (explicitly set fields only) or a mapping."""
    if isinstance(payload, BaseModel):
        return payload.model_dump(exclude_unset=True)
    if isinstance(payload, Mapping):
        return dict(payload)
    return {}
