"""
Service and blog categories, plus user roles.

These lookups have static fallbacks: when the backend read fails the named
default list is returned instead of an error.
"""

from loguru import logger

from storefront.models import Role
from storefront.normalizers import ADMIN_ROLE_ID, CLIENT_ROLE_ID, normalize_category
from storefront.normalizers.fields import to_record_id
from storefront.resources.base import BaseResource
from storefront.services.errors import ServiceError
from storefront.utils import log_operation

DEFAULT_SERVICE_CATEGORIES = (
    "Animacion y Entretenimiento",
    "Musica y Sonido",
    "Decoracion y Ambientacion",
    "Catering y Banquetería",
    "Fotografia y Video",
    "Logistica y Produccion",
    "Estilo y Belleza",
    "Eventos Infantiles",
    "Eventos Especiales",
)

DEFAULT_BLOG_CATEGORIES = (
    "Tendencia",
    "Consejos",
    "Experiencias",
)

DEFAULT_ROLES = (
    Role(id=CLIENT_ROLE_ID, nombre="cliente"),
    Role(id=ADMIN_ROLE_ID, nombre="admin"),
)


class CategoriesResource(BaseResource):
    """Category lookups for the service and blog forms."""

    SERVICE_CATEGORY_PATH = "/service_category"
    BLOG_CATEGORY_PATH = "/blog_category"

    @property
    def path(self) -> str:
        return self.SERVICE_CATEGORY_PATH

    @log_operation
    async def service_categories(self, ttl: int | None = None) -> list[str]:
        return await self._fetch_names(
            self.SERVICE_CATEGORY_PATH, DEFAULT_SERVICE_CATEGORIES, ttl
        )

    @log_operation
    async def blog_categories(self, ttl: int | None = None) -> list[str]:
        return await self._fetch_names(self.BLOG_CATEGORY_PATH, DEFAULT_BLOG_CATEGORIES, ttl)

    async def _fetch_names(
        self,
        path: str,
        fallback: tuple[str, ...],
        ttl: int | None,
    ) -> list[str]:
        ttl = ttl if ttl is not None else self.client.settings.category_cache_ttl_ms
        try:
            records = await self._cached_list(path, ttl)
        except ServiceError as e:
            logger.warning(f"Failed to fetch {path}, using static categories: {e}")
            return list(fallback)

        names = [name for name in map(normalize_category, records) if name]
        logger.info(f"Fetched {len(names)} categories from {path}")
        return names


class RolesResource(BaseResource):
    """User roles (backend table `role`)."""

    @property
    def path(self) -> str:
        return "/role"

    @log_operation
    async def list_all(self, ttl: int | None = None) -> list[Role]:
        try:
            records = await self._cached_list(self.path, ttl)
        except ServiceError as e:
            logger.warning(f"Failed to fetch roles, using static roles: {e}")
            return list(DEFAULT_ROLES)

        roles = []
        for record in records:
            if isinstance(record, dict) and record.get("id") is not None:
                roles.append(Role(id=to_record_id(record["id"]), nombre=normalize_category(record)))
        return roles
