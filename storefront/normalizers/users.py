"""
User records: backend `user` table <-> storefront User.
"""

from collections.abc import Mapping
from typing import Any

from storefront.models import ADMIN_ROLE_ID, CLIENT_ROLE_ID, User
from storefront.normalizers.fields import as_mapping, to_int, to_record_id, to_text

ADMIN_LABEL = "admin"
CLIENT_LABEL = "cliente"


def role_label(role_id: Any) -> str:
    """2 is admin, everything else is a client."""
    return ADMIN_LABEL if to_int(role_id, CLIENT_ROLE_ID) == ADMIN_ROLE_ID else CLIENT_LABEL


def role_id_for(label: Any) -> int:
    return ADMIN_ROLE_ID if label == ADMIN_LABEL else CLIENT_ROLE_ID


def user_from_remote(raw: Any) -> User | None:
    """Map a backend user record; None when there is no record."""
    if not isinstance(raw, Mapping):
        return None

    role_id = to_int(raw.get("role_id"), CLIENT_ROLE_ID)
    password = raw.get("password")
    password_hash = raw.get("password_hash")
    return User(
        id=to_record_id(raw.get("id")),
        nombre=to_text(raw.get("name")),
        apellidos=to_text(raw.get("last_name")),
        email=to_text(raw.get("email")),
        telefono=to_text(raw.get("phone")),
        role_id=role_id,
        rol=role_label(role_id),
        creado_en=raw.get("created_at"),
        password=password if isinstance(password, str) else None,
        password_hash=password_hash if isinstance(password_hash, str) else None,
    )


def user_to_remote(payload: Any, partial: bool = False) -> dict[str, Any]:
    """
    Map a storefront user (model or dict) to the backend shape.

    A full mapping fills every required column and defaults the role to
    client unless `rol == "admin"` or an explicit role id is given. A partial
    mapping (for PATCH) only carries the fields the caller supplied.
    """
    data = as_mapping(payload)
    if partial:
        remote: dict[str, Any] = {}
    else:
        remote = {
            "name": "",
            "last_name": "",
            "email": "",
            "password": "",
            "role_id": CLIENT_ROLE_ID,
        }

    for source, target in (("nombre", "name"), ("apellidos", "last_name"), ("email", "email")):
        value = data.get(source, data.get(target))
        if isinstance(value, str):
            remote[target] = value.strip()

    password = data.get("password")
    if isinstance(password, str) and password:
        remote["password"] = password

    explicit_role = data.get("role_id", data.get("rol_id"))
    if explicit_role is not None:
        remote["role_id"] = to_int(explicit_role, CLIENT_ROLE_ID)
    elif data.get("rol"):
        remote["role_id"] = role_id_for(data["rol"])

    telefono = data.get("telefono")
    if isinstance(telefono, str) and telefono.strip():
        remote["phone"] = telefono.strip()

    return remote
