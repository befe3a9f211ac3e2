"""Object storage client for product images.

Provides:
- Upload/delete product images in GCS (or a local directory in dev)
- Blob path building and validation per item number
- Public URL generation for stored images
"""

import asyncio
from pathlib import Path

from google.cloud import storage
from google.cloud.storage import Bucket

from showroom.config import settings
from showroom.infra.logging import get_logger

logger = get_logger(__name__)

ALLOWED_IMAGE_TYPES: dict[str, str] = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
}


class StoragePathError(Exception):
    """Raised when a blob path would escape its product folder."""


class StorageClient:
    """Product image storage backed by GCS or the local filesystem."""

    def __init__(
        self,
        bucket_name: str | None = None,
        use_local: bool | None = None,
        local_root: str | Path | None = None,
    ) -> None:
        """Initialize storage client.

        Args:
            bucket_name: GCS bucket name. Defaults to settings.gcs_bucket.
            use_local: Write to the local filesystem instead of GCS.
            local_root: Root directory for local mode.
        """
        self._client: storage.Client | None = None
        self._bucket: Bucket | None = None
        self._bucket_name = bucket_name or settings.gcs_bucket
        self._use_local = settings.use_local_storage if use_local is None else use_local
        self._local_root = Path(local_root or settings.local_storage_root)

    @property
    def client(self) -> storage.Client:
        """Lazy-load the GCS client."""
        if self._client is None:
            self._client = storage.Client()
            logger.info("GCS client initialized")
        return self._client

    @property
    def bucket(self) -> Bucket:
        """Get the configured bucket."""
        if self._bucket is None:
            self._bucket = self.client.bucket(self._bucket_name)
            logger.info("GCS bucket configured", bucket=self._bucket_name)
        return self._bucket

    def build_image_path(self, item_no: str, image_type: str, content_type: str) -> str:
        """Build the blob path for a product image.

        Layout: {item_no}/{image_type}.{ext}, e.g. VWF22A1091LX-9C/main.jpg

        Args:
            item_no: Product item number (folder name)
            image_type: "main" or "view-{n}"
            content_type: MIME type of the upload

        Returns:
            Blob path relative to the bucket

        Raises:
            StoragePathError: If the item number is not a single safe segment
            ValueError: If the content type is not an accepted image type
        """
        folder = item_no.strip()
        if not folder or "/" in folder or "\\" in folder or ".." in folder:
            logger.warning("Rejected image path", item_no=item_no)
            raise StoragePathError(f"Invalid item number for storage path: '{item_no}'")

        ext = ALLOWED_IMAGE_TYPES.get(content_type)
        if ext is None:
            raise ValueError(
                f"Invalid file type: {content_type}. Allowed: {sorted(ALLOWED_IMAGE_TYPES)}"
            )

        return f"{folder}/{image_type}.{ext}"

    def public_url(self, blob_path: str) -> str:
        """Get the public URL for a stored image."""
        if self._use_local:
            return (self._local_root / blob_path).as_posix()
        return f"{settings.image_base_url.rstrip('/')}/{self._bucket_name}/{blob_path}"

    async def upload_bytes(
        self,
        data: bytes,
        blob_path: str,
        content_type: str = "image/jpeg",
    ) -> str:
        """Upload image bytes, replacing any existing blob at the same path.

        Args:
            data: Image bytes
            blob_path: Destination blob path
            content_type: MIME type

        Returns:
            Public URL of the uploaded image
        """
        if self._use_local:
            target = self._local_root / blob_path
            target.parent.mkdir(parents=True, exist_ok=True)
            await asyncio.to_thread(target.write_bytes, data)
        else:
            blob = self.bucket.blob(blob_path)
            blob.cache_control = "public, max-age=3600"
            await asyncio.to_thread(blob.upload_from_string, data, content_type=content_type)

        logger.info(
            "Uploaded image",
            blob_path=blob_path,
            size=len(data),
            local=self._use_local,
        )

        return self.public_url(blob_path)

    def blob_path_for_url(self, url: str) -> str | None:
        """Map a public URL back to its blob path.

        Returns None for URLs that do not point into this bucket or root.
        """
        prefix = self.public_url("_")[:-1]
        if not url.startswith(prefix) or len(url) == len(prefix):
            return None
        return url[len(prefix):]

    async def delete(self, blob_path: str) -> None:
        """Delete a stored image if it exists."""
        if self._use_local:
            target = self._local_root / blob_path
            target.unlink(missing_ok=True)
        else:
            blob = self.bucket.blob(blob_path)
            if await asyncio.to_thread(blob.exists):
                await asyncio.to_thread(blob.delete)

        logger.info("Deleted image", blob_path=blob_path)


# Singleton instance
_storage_client: StorageClient | None = None


def get_storage_client() -> StorageClient:
    """Get storage client singleton."""
    global _storage_client
    if _storage_client is None:
        _storage_client = StorageClient()
    return _storage_client
