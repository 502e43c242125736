"""
Domain facades over the storefront backend.
"""

from storefront.resources.auth import AuthResource
from storefront.resources.base import BaseResource
from storefront.resources.blogs import BlogPostsResource
from storefront.resources.categories import (
    DEFAULT_BLOG_CATEGORIES,
    DEFAULT_ROLES,
    DEFAULT_SERVICE_CATEGORIES,
    CategoriesResource,
    RolesResource,
)
from storefront.resources.listings import ListingsResource
from storefront.resources.uploads import UploadsResource
from storefront.resources.users import UsersResource

__all__ = [
    "AuthResource",
    "BaseResource",
    "BlogPostsResource",
    "CategoriesResource",
    "RolesResource",
    "DEFAULT_BLOG_CATEGORIES",
    "DEFAULT_ROLES",
    "DEFAULT_SERVICE_CATEGORIES",
    "ListingsResource",
    "UploadsResource",
    "UsersResource",
]
