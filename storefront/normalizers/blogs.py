"""
Blog records: backend `blog` table <-> storefront BlogPost.
"""

from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from storefront.models import BlogPost
from storefront.normalizers.fields import (
    as_mapping,
    normalize_category,
    pick_image_field,
    resolve_image,
    to_record_id,
    to_text,
)

BLOG_IMAGE_FIELDS = ("image_url", "image", "image_file")

# New posts wait for admin approval
DEFAULT_BLOG_STATUS = "pending"


def blog_from_remote(raw: Any) -> BlogPost | None:
    """Map a backend blog record; None when there is no record."""
    if not isinstance(raw, Mapping):
        return None

    image = resolve_image(pick_image_field(raw, BLOG_IMAGE_FIELDS))
    user_id = to_record_id(raw.get("user_id"))
    return BlogPost(
        id=to_record_id(raw.get("id")),
        titulo=to_text(raw.get("title")),
        contenido=to_text(raw.get("content")),
        categoria=normalize_category(raw.get("category")),
        imagen=image,
        imagen_url=image,
        image_url=image,
        fecha_publicacion=raw.get("publication_date"),
        fecha=raw.get("publication_date"),
        estado=to_text(raw.get("status")),
        autor_id=user_id,
        autor=f"Usuario {user_id}",
        creado_en=raw.get("created_at"),
    )


def blog_to_remote(payload: Any, partial: bool = False) -> dict[str, Any]:
    """
    Map a storefront blog post (model or dict) to the backend shape.

    A full mapping stamps the publication date with the current UTC time and
    puts the post in the moderation queue unless a status is given.
    """
    data = as_mapping(payload)
    remote: dict[str, Any] = {}

    def put(key: str, present: bool, value: Any) -> None:
        if present or not partial:
            remote[key] = value

    put("title", "titulo" in data, data.get("titulo"))
    put("content", "contenido" in data, data.get("contenido"))
    put("category", "categoria" in data, normalize_category(data.get("categoria")))

    raw_image = pick_image_field(data, ("imagen_url", "imagen", "image_url"))
    put("image_url", raw_image is not None, resolve_image(raw_image) or None)

    put(
        "publication_date",
        "fecha_publicacion" in data,
        data.get("fecha_publicacion") or datetime.now(timezone.utc).isoformat(),
    )
    put("status", "estado" in data, data.get("estado") or DEFAULT_BLOG_STATUS)

    user_id = data.get("autor_id") or data.get("user_id")
    put("user_id", user_id is not None, user_id)
    return remote
