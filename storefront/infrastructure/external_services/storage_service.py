"""Storage service using MinIO"""

import logging
import uuid
from io import BytesIO
from typing import Optional

from minio import Minio
from minio.error import S3Error

from ...core.config import settings

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when an object store operation fails"""


def public_object_url(bucket: str, object_path: Optional[str]) -> Optional[str]:
    """Public URL for a stored object path, or None when there is no path"""
    if not object_path:
        return None
    if object_path.startswith("http://") or object_path.startswith("https://"):
        return object_path
    if settings.MINIO_PUBLIC_URL:
        base = settings.MINIO_PUBLIC_URL.rstrip("/")
    else:
        protocol = "https" if settings.MINIO_SECURE else "http"
        base = f"{protocol}://{settings.MINIO_ENDPOINT}"
    return f"{base}/{bucket}/{object_path.lstrip('/')}"


class StorageService:

    def __init__(self):
        self.client = Minio(
            endpoint=settings.MINIO_ENDPOINT,
            access_key=settings.MINIO_ACCESS_KEY,
            secret_key=settings.MINIO_SECRET_KEY,
            secure=settings.MINIO_SECURE
        )

    def _ensure_bucket_exists(self, bucket: str) -> None:
        if not self.client.bucket_exists(bucket):
            self.client.make_bucket(bucket)

    async def upload_file(
        self,
        bucket: str,
        data: bytes,
        filename: str,
        content_type: str,
        prefix: str = "",
        object_path: Optional[str] = None,
    ) -> str:
        """Upload bytes and return the object path inside the bucket"""
        if object_path is None:
            safe_name = filename.replace("/", "_").replace(" ", "_")
            object_path = f"{prefix.strip('/')}/{uuid.uuid4().hex}_{safe_name}".lstrip("/")
        try:
            self._ensure_bucket_exists(bucket)
            self.client.put_object(
                bucket_name=bucket,
                object_name=object_path,
                data=BytesIO(data),
                length=len(data),
                content_type=content_type,
            )
        except S3Error as e:
            logger.error("Failed to upload %s to %s: %s", object_path, bucket, e)
            raise StorageError(f"Failed to upload file: {e}") from e
        return object_path

    async def delete_file(self, bucket: str, object_path: str) -> bool:
        """Delete an object; a missing object is logged and reported as False"""
        try:
            self.client.remove_object(bucket, object_path)
            return True
        except S3Error as e:
            logger.warning("Failed to delete %s from %s: %s", object_path, bucket, e)
            return False

    async def download_file(self, bucket: str, object_path: str) -> bytes:
        response = None
        try:
            response = self.client.get_object(bucket, object_path)
            return response.read()
        except S3Error as e:
            logger.error("Failed to download %s from %s: %s", object_path, bucket, e)
            raise StorageError(f"Failed to fetch file: {e}") from e
        finally:
            if response is not None:
                response.close()
                response.release_conn()
