"""
Shape normalizers between backend records and storefront domain records.
"""

from storefront.normalizers.fields import (
    extract_token,
    extract_upload_url,
    normalize_category,
    pick_image_field,
    resolve_image,
)
from storefront.normalizers.users import (
    ADMIN_ROLE_ID,
    CLIENT_ROLE_ID,
    role_id_for,
    role_label,
    user_from_remote,
    user_to_remote,
)
from storefront.normalizers.listings import listing_from_remote, listing_to_remote
from storefront.normalizers.blogs import blog_from_remote, blog_to_remote

__all__ = [
    "extract_token",
    "extract_upload_url",
    "normalize_category",
    "pick_image_field",
    "resolve_image",
    "ADMIN_ROLE_ID",
    "CLIENT_ROLE_ID",
    "role_id_for",
    "role_label",
    "user_from_remote",
    "user_to_remote",
    "listing_from_remote",
    "listing_to_remote",
    "blog_from_remote",
    "blog_to_remote",
]
