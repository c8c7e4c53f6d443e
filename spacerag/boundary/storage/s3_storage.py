"""
S3-compatible blob storage.

Reads, writes and presigns document objects in S3 or any S3-compatible
store (Cloudflare R2, MinIO) through boto3. boto3 is synchronous, so
calls run in the threadpool.

Dependencies: boto3, fastapi.concurrency
System role: Production blob storage
"""

import logging

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from fastapi.concurrency import run_in_threadpool

from spacerag.boundary.storage.base import BlobStorage, StoredObject
from spacerag.configs.storage import BlobStorageSettings
from spacerag.core.exceptions import MissingInputError, StorageError

logger = logging.getLogger(__name__)

_MISSING_CODES = {"404", "NoSuchKey", "NotFound"}


class S3BlobStorage(BlobStorage):
    """S3 client for document bucket operations."""

    def __init__(self, settings: BlobStorageSettings, client=None) -> None:
        """
        Initialize S3 client for the document bucket.

        Args:
            settings: Blob storage settings
            client: Pre-built boto3 S3 client (tests)
        """
        self._bucket = settings.bucket
        self._public_base_url = settings.public_base_url
        self._endpoint_url = settings.endpoint_url
        self._client = client or boto3.client(
            "s3",
            region_name=settings.region,
            endpoint_url=settings.endpoint_url,
            aws_access_key_id=settings.access_key_id,
            aws_secret_access_key=settings.secret_access_key,
        )

    async def get(self, key: str) -> bytes:
        try:
            response = await run_in_threadpool(
                self._client.get_object, Bucket=self._bucket, Key=key
            )
            return await run_in_threadpool(response["Body"].read)
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code", "")
            if code in _MISSING_CODES:
                raise MissingInputError(f"Object not found in storage: {key}") from e
            raise StorageError(f"Failed to read {key}: {code or e}") from e
        except BotoCoreError as e:
            raise StorageError(f"Failed to read {key}: {e}") from e

    async def put(self, data: bytes, key: str, content_type: str) -> StoredObject:
        try:
            await run_in_threadpool(
                self._client.put_object,
                Bucket=self._bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
            )
        except (ClientError, BotoCoreError) as e:
            raise StorageError(f"Failed to write {key}: {e}") from e

        logger.info(
            f"{__name__}:put - Stored object",
            extra={"key": key, "size": len(data), "content_type": content_type},
        )
        return StoredObject(key=key, url=self._object_url(key), size=len(data), content_type=content_type)

    async def presign(self, key: str, ttl_seconds: int) -> str:
        return await run_in_threadpool(
            self._client.generate_presigned_url,
            ClientMethod="get_object",
            Params={"Bucket": self._bucket, "Key": key},
            ExpiresIn=ttl_seconds,
        )

    def _object_url(self, key: str) -> str:
        if self._public_base_url:
            return f"{self._public_base_url.rstrip('/')}/{key}"
        if self._endpoint_url:
            return f"{self._endpoint_url.rstrip('/')}/{self._bucket}/{key}"
        return f"s3://{self._bucket}/{key}"
