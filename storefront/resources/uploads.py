"""
File storage (backend endpoint `/file`).
"""

from loguru import logger

from storefront.normalizers import extract_upload_url
from storefront.resources.base import BaseResource
from storefront.services.errors import UploadError
from storefront.utils import log_operation

UPLOAD_FIELD = "file"


class UploadsResource(BaseResource):
    @property
    def path(self) -> str:
        return "/file"

    @log_operation
    async def upload_image(
        self,
        filename: str,
        content: bytes,
        content_type: str = "application/octet-stream",
    ) -> str:
        """
        Upload one image and return its public URL.

        Raises:
            UploadError: If the response has no resolvable URL
        """
        data = await self.client.post_multipart(
            self.path, files={UPLOAD_FIELD: (filename, content, content_type)}
        )
        url = extract_upload_url(data)
        if not url:
            raise UploadError(f"Upload of '{filename}' returned no URL")
        logger.info(f"Uploaded {filename} ({len(content)} bytes)")
        return url
