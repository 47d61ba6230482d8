# noteshub/core/storage.py
import logging
import secrets
import string
import time
from pathlib import PurePosixPath
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from noteshub.core.config import Settings, get_settings
from noteshub.core.errors import TransferFailed

logger = logging.getLogger(__name__)

_SUFFIX_ALPHABET = string.ascii_lowercase + string.digits


def build_key(account_id: int, original_name: str, now: Optional[float] = None) -> str:
    """Collision-resistant object key, grouped per account.

    ``<account id>/<epoch millis>-<random suffix>.<ext>``; the extension is
    dropped when the original name has none.
    """
    millis = int((time.time() if now is None else now) * 1000)
    suffix = "".join(secrets.choice(_SUFFIX_ALPHABET) for _ in range(11))
    ext = PurePosixPath(original_name).suffix.lower()
    return f"{account_id}/{millis}-{suffix}{ext}"


class FileStorage:
    """Thin wrapper over one S3 bucket."""

    def __init__(self, client, bucket: str, public_base_url: Optional[str] = None):
        self.client = client
        self.bucket = bucket
        self.public_base_url = public_base_url

    @classmethod
    def from_settings(cls, settings: Settings) -> "FileStorage":
        s3 = boto3.client(
            "s3",
            aws_access_key_id=settings.aws_access_key_id,
            aws_secret_access_key=settings.aws_secret_access_key,
            region_name=settings.aws_region,
            endpoint_url=settings.aws_s3_endpoint_url,
        )
        return cls(s3, settings.aws_s3_bucket_name, settings.public_base_url)

    def public_url(self, key: str) -> str:
        if self.public_base_url:
            return f"{self.public_base_url.rstrip('/')}/{key}"
        region = self.client.meta.region_name
        return f"https://{self.bucket}.s3.{region}.amazonaws.com/{key}"

    def put(self, key: str, content: bytes, content_type: Optional[str] = None) -> str:
        try:
            self.client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=content,
                ContentType=content_type or "application/octet-stream",
                CacheControl="max-age=3600",
            )
        except (BotoCoreError, ClientError) as exc:
            logger.error("put_object failed for %s: %s", key, exc)
            raise TransferFailed(f"Upload failed: {exc}") from exc
        return self.public_url(key)

    def get(self, key: str):
        """Return ``(bytes, content_type)`` for a stored object."""
        try:
            obj = self.client.get_object(Bucket=self.bucket, Key=key)
        except (BotoCoreError, ClientError) as exc:
            logger.error("get_object failed for %s: %s", key, exc)
            raise TransferFailed("File missing in cloud") from exc
        return obj["Body"].read(), obj.get("ContentType") or "application/octet-stream"


_storage: Optional[FileStorage] = None


def get_storage() -> FileStorage:
    global _storage
    if _storage is None:
        _storage = FileStorage.from_settings(get_settings())
    return _storage
