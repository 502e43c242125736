"""
Listing records: backend `service` table <-> storefront Listing.

The backend has stored the image under several column names and shapes over
time (`image_url`, `image`, `image_file`, `file`; string, object or array);
all of them collapse to a single URL string on `Listing.imagen`.
"""

from collections.abc import Mapping
from typing import Any

from storefront.models import Listing
from storefront.normalizers.fields import (
    as_mapping,
    normalize_category,
    pick_image_field,
    resolve_image,
    to_int,
    to_number,
    to_record_id,
    to_text,
)

LISTING_IMAGE_FIELDS = ("image_url", "image", "image_file", "file")


def listing_from_remote(raw: Any) -> Listing | None:
    """Map a backend service record; None when there is no record."""
    if not isinstance(raw, Mapping):
        return None

    return Listing(
        id=to_record_id(raw.get("id")),
        nombre=to_text(raw.get("name")),
        descripcion=to_text(raw.get("description")),
        precio=to_number(raw.get("price")),
        categoria=normalize_category(raw.get("category")),
        proveedor=to_text(raw.get("provider")),
        disponibilidad=to_text(raw.get("availability")),
        imagen=resolve_image(pick_image_field(raw, LISTING_IMAGE_FIELDS)),
        valoracion=to_number(raw.get("rating")) or 0,
        num_valoraciones=to_int(raw.get("num_ratings")),
        disponible=raw.get("available") is not False,
        estado=to_text(raw.get("status")),
        creado_por=to_record_id(raw.get("user_id")),
        service_category_id=to_record_id(
            raw.get("service_category_id") or raw.get("service_category")
        ),
        creado_en=raw.get("created_at"),
    )


def listing_to_remote(payload: Any, partial: bool = False) -> dict[str, Any]:
    """
    Map a storefront listing (model or dict) to the backend shape.

    The image may arrive as a URL string or as an upload result object; it is
    sent as a single `image_url` string (None when empty). A partial mapping
    (for PATCH) only carries the fields the caller supplied and applies no
    defaults.
    """
    data = as_mapping(payload)
    remote: dict[str, Any] = {}

    def put(key: str, present: bool, value: Any) -> None:
        if present or not partial:
            remote[key] = value

    put("name", "nombre" in data, data.get("nombre"))
    put("description", "descripcion" in data, data.get("descripcion"))
    put("price", "precio" in data, data.get("precio"))
    put("category", "categoria" in data, normalize_category(data.get("categoria")))
    put("provider", "proveedor" in data, data.get("proveedor"))
    put("availability", "disponibilidad" in data, data.get("disponibilidad"))

    raw_image = pick_image_field(data, ("imagen_url", "imagen"))
    put("image_url", raw_image is not None, resolve_image(raw_image) or None)

    put("rating", "valoracion" in data, data.get("valoracion") or 0)
    num_ratings = data.get("num_valoraciones", data.get("numValoraciones"))
    put("num_ratings", num_ratings is not None, num_ratings or 0)
    put("available", "disponible" in data, data.get("disponible") is not False)
    put("status", "estado" in data, data.get("estado") or "active")

    user_id = data.get("creado_por") or data.get("user_id")
    put("user_id", user_id is not None, user_id)

    category_id = data.get("service_category_id") or data.get("service_category")
    put(
        "service_category_id",
        "service_category_id" in data or "service_category" in data,
        category_id or None,
    )
    return remote
