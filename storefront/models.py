"""
Domain records consumed by the storefront UI, using Pydantic models.

These are the shapes after normalization; the backend's own field names
only appear in storefront.normalizers.
"""

from dataclasses import dataclass, field
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

RecordId = int | str

CLIENT_ROLE_ID = 1
ADMIN_ROLE_ID = 2

PUBLISHED_STATES = frozenset({"published", "publicado", "approved", "aprobado"})


class User(BaseModel):
    """Storefront user (client or admin)."""

    id: RecordId | None = None
    nombre: str = ""
    apellidos: str = ""
    email: str = ""
    telefono: str = ""
    role_id: int = CLIENT_ROLE_ID
    rol: Literal["admin", "cliente"] = "cliente"
    creado_en: Any = None
    # Only present on records read for the local credential check
    password: str | None = Field(default=None, repr=False)
    password_hash: str | None = Field(default=None, repr=False)

    @model_validator(mode="before")
    @classmethod
    def derive_rol(cls, data: Any) -> Any:
        """`rol` follows `role_id` (2 is admin); a `rol` given alone sets the id."""
        if not isinstance(data, dict) or ("role_id" not in data and "rol" not in data):
            return data
        data = dict(data)
        if data.get("role_id") is None:
            data["role_id"] = ADMIN_ROLE_ID if data.get("rol") == "admin" else CLIENT_ROLE_ID
        try:
            is_admin = int(data["role_id"]) == ADMIN_ROLE_ID
        except (TypeError, ValueError):
            return data
        data["rol"] = "admin" if is_admin else "cliente"
        return data

    @property
    def is_admin(self) -> bool:
        return self.rol == "admin"

    def without_secrets(self) -> "User":
        """Copy safe to persist client-side."""
        return self.model_copy(update={"password": None, "password_hash": None})


class Listing(BaseModel):
    """Catalog service offered by a provider."""

    model_config = ConfigDict(populate_by_name=True, serialize_by_alias=True)

    id: RecordId | None = None
    nombre: str = ""
    descripcion: str = ""
    precio: float | None = None
    categoria: str = ""
    proveedor: str = ""
    disponibilidad: str = ""
    imagen: str = ""
    valoracion: float = 0
    num_valoraciones: int = Field(default=0, alias="numValoraciones")
    disponible: bool = True
    estado: str = ""
    creado_por: RecordId | None = None
    service_category_id: RecordId | None = None
    creado_en: Any = None


class BlogPost(BaseModel):
    """Blog entry; `estado` drives the moderation workflow."""

    id: RecordId | None = None
    titulo: str = ""
    contenido: str = ""
    categoria: str = ""
    # Same resolved URL under the three names the views use
    imagen: str = ""
    imagen_url: str = ""
    image_url: str = ""
    fecha_publicacion: Any = None
    fecha: Any = None
    estado: str = ""
    autor_id: RecordId | None = None
    autor: str = ""
    creado_en: Any = None

    @property
    def is_published(self) -> bool:
        return self.estado.lower() in PUBLISHED_STATES


class Role(BaseModel):
    id: RecordId
    nombre: str


class AuthResult(BaseModel):
    """
    Outcome of a login/signup against the auth service.

    `confirmed` is False when the backend answered without a recognizable
    token: the user is authenticated locally but not remotely.
    """

    token: str | None = Field(default=None, repr=False)
    confirmed: bool = False
    raw: Any = None


@dataclass
class MultipartPayload:
    """
    A pre-built multipart body (form fields plus files), sent as-is.

    files maps field name to (filename, content, content_type), the tuple
    form httpx accepts.
    """

    fields: dict[str, Any] = field(default_factory=dict)
    files: dict[str, tuple[str, bytes, str]] = field(default_factory=dict)

    def get(self, name: str, default: Any = None) -> Any:
        return self.fields.get(name, default)

    def preview(self) -> dict[str, Any]:
        """Log-friendly view: files reduced to name, type and size."""
        out: dict[str, Any] = dict(self.fields)
        for name, (filename, content, content_type) in self.files.items():
            out[name] = {"fileName": filename, "fileType": content_type, "size": len(content)}
        return out


class SignInResult(BaseModel):
    """Local sign-in/registration outcome: the user snapshot plus the token attempt."""

    user: User
    auth: AuthResult = Field(default_factory=AuthResult)
