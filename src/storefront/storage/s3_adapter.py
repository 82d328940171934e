"""S3 object storage adapter."""

import time
from urllib.parse import urlparse

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from storefront.shared.exceptions import StorageError
from storefront.shared.logging import get_logger
from storefront.storage.port import StoragePort

logger = get_logger(__name__)


class S3Storage(StoragePort):
    """Stores objects in an S3 (or S3-compatible) bucket with public-read ACL."""

    def __init__(
        self,
        bucket: str,
        region_name: str = "us-east-1",
        endpoint_url: str | None = None,
        client=None,
    ) -> None:
        self.bucket = bucket
        self.region_name = region_name
        self.endpoint_url = endpoint_url
        self._client = client

    def _get_client(self):
        if self._client is None:
            kwargs = {"region_name": self.region_name}
            if self.endpoint_url:
                kwargs["endpoint_url"] = self.endpoint_url
            self._client = boto3.client("s3", **kwargs)
        return self._client

    def _public_url(self, key: str) -> str:
        if self.endpoint_url:
            return f"{self.endpoint_url.rstrip('/')}/{self.bucket}/{key}"
        return f"https://{self.bucket}.s3.{self.region_name}.amazonaws.com/{key}"

    def _key_from_url(self, url: str) -> str:
        path = urlparse(url).path.lstrip("/")
        if self.endpoint_url and path.startswith(f"{self.bucket}/"):
            path = path[len(self.bucket) + 1 :]
        return path

    def upload(self, data: bytes, content_type: str, folder: str, filename: str) -> str:
        key = f"{folder}/{time.time_ns() // 1_000_000}-{filename}"
        try:
            self._get_client().put_object(
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
                ACL="public-read",
            )
        except (BotoCoreError, ClientError) as exc:
            logger.error("S3 upload failed", bucket=self.bucket, key=key, error=str(exc))
            raise StorageError("Error uploading file to storage") from exc
        logger.info("Stored object in S3", bucket=self.bucket, key=key)
        return self._public_url(key)

    def delete(self, url: str) -> None:
        key = self._key_from_url(url)
        try:
            self._get_client().delete_object(Bucket=self.bucket, Key=key)
        except (BotoCoreError, ClientError) as exc:
            logger.error("S3 delete failed", bucket=self.bucket, key=key, error=str(exc))
            raise StorageError("Error deleting file from storage") from exc
        logger.info("Deleted object from S3", bucket=self.bucket, key=key)
