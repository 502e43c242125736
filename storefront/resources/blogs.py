"""
Blog posts (backend table `blog`) with the moderation workflow.

Posts are created as `pending`; an admin moves them to `published` (or
rejects them) through update_status.
"""

from typing import Any

from loguru import logger

from storefront.models import BlogPost, MultipartPayload
from storefront.normalizers import blog_from_remote, blog_to_remote
from storefront.resources.base import BaseResource
from storefront.services.errors import RemoteError, ValidationError
from storefront.utils import log_operation, redact


class BlogPostsResource(BaseResource):
    """Blog facade."""

    @property
    def path(self) -> str:
        return "/blog"

    @log_operation
    async def list_all(
        self,
        include_all: bool = False,
        limit: int | None = None,
        ttl: int | None = None,
    ) -> list[BlogPost]:
        """
        Fetch blog posts.

        The blog table has no status filter, so the whole collection is read
        (one cache entry) and public views keep only published posts.

        Args:
            include_all: Also return pending/rejected posts (moderation view)
            limit: Optional positive cap
            ttl: Cache TTL in milliseconds
        """
        records = await self._cached_list(self.path, ttl)
        posts = [post for post in map(blog_from_remote, records) if post is not None]
        if not include_all:
            posts = [post for post in posts if post.is_published]
        if isinstance(limit, int) and not isinstance(limit, bool) and limit > 0:
            posts = posts[:limit]

        logger.info(f"Fetched {len(posts)} blog posts")
        return posts

    @log_operation
    async def get_by_id(self, post_id: Any) -> BlogPost | None:
        data = await self.client.get(self.item_path(post_id))
        return blog_from_remote(data)

    @log_operation
    async def create(self, payload: MultipartPayload | BlogPost | dict[str, Any]) -> BlogPost | None:
        """
        Create a blog post from a JSON-able payload or a multipart form.

        Raises:
            ValidationError: If title or content is blank (nothing is sent)
        """
        if isinstance(payload, MultipartPayload):
            logger.debug(f"Multipart blog payload: {redact(payload)}")
            _require_text(payload.get("title"), payload.get("content"))
            remote = None
        else:
            remote = blog_to_remote(payload)
            _require_text(remote.get("title"), remote.get("content"))

        try:
            if remote is None:
                data = await self.client.post_multipart(
                    self.path, data=payload.fields, files=payload.files or None
                )
            else:
                data = await self.client.post(self.path, json=remote)
        except RemoteError as e:
            self.raise_if_duplicate(e)
            raise
        finally:
            self.invalidate()

        post = blog_from_remote(data)
        logger.info(f"Blog post created: {post.id if post else None}")
        return post

    @log_operation
    async def update(self, post_id: Any, payload: BlogPost | dict[str, Any]) -> BlogPost | None:
        """Partial update: only the supplied fields are sent."""
        try:
            data = await self.client.patch(
                self.item_path(post_id), json=blog_to_remote(payload, partial=True)
            )
        except RemoteError as e:
            self.raise_if_duplicate(e)
            raise
        finally:
            self.invalidate()
        return blog_from_remote(data)

    @log_operation
    async def update_status(self, post_id: Any, estado: str) -> BlogPost | None:
        """Moderation: approve, reject or re-queue a post."""
        if not estado or not estado.strip():
            raise ValidationError("Blog status must not be empty")
        try:
            data = await self.client.patch(
                self.item_path(post_id), json={"status": estado.strip()}
            )
        finally:
            self.invalidate()
        logger.info(f"Blog post {post_id} moved to '{estado.strip()}'")
        return blog_from_remote(data)

    @log_operation
    async def delete(self, post_id: Any) -> None:
        try:
            await self.client.delete(self.item_path(post_id))
        finally:
            self.invalidate()
        logger.info(f"Blog post deleted: {post_id}")


def _require_text(title: Any, content: Any) -> None:
    if not str(title or "").strip() or not str(content or "").strip():
        raise ValidationError("title and content are required")
