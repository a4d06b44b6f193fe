"""Object storage access for audio and artwork."""

import logging
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from src.core.settings import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()


class StorageError(Exception):
    """Raised when a fetch URL cannot be produced."""


class ObjectStorage:
    """
    Issues time-limited fetch URLs for stored objects.

    The service only ever handles opaque object keys; bytes move directly
    between clients and the bucket.
    """

    def __init__(self, bucket: Optional[str] = None, client=None):
        self.bucket = bucket or settings.storage_bucket
        self.client = client or boto3.client(
            "s3",
            region_name=settings.aws_region,
            aws_access_key_id=settings.aws_access_key_id,
            aws_secret_access_key=settings.aws_secret_access_key,
        )

    def get_signed_url(self, key: str, expires_in: Optional[int] = None) -> str:
        """Return a presigned GET URL for ``key``."""
        if not key:
            raise StorageError("Object key is required")
        try:
            return self.client.generate_presigned_url(
                "get_object",
                Params={"Bucket": self.bucket, "Key": key},
                ExpiresIn=expires_in or settings.presigned_url_expire_seconds,
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to presign {key}: {e}")
            raise StorageError(f"Could not create fetch URL for {key}") from e


_storage = None


def get_object_storage() -> ObjectStorage:
    """Get the global object storage instance."""
    global _storage
    if _storage is None:
        _storage = ObjectStorage()
    return _storage
