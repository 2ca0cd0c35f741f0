"""
Adapter: S3 Storage Service

Concrete IStorageService on boto3. Works against AWS S3 or any
S3-compatible endpoint (MinIO); only the endpoint and credentials change.
"""

import logging

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from upload_broker.config.settings import Settings
from upload_broker.core.interfaces.storage_service import (
    IStorageService,
    ObjectInfo,
    ObjectNotFoundError,
    StorageError,
)

logger = logging.getLogger(__name__)

_NOT_FOUND_CODES = {"404", "NoSuchKey", "NotFound"}


class S3StorageService(IStorageService):
    """
    Presigned URLs and HEAD checks for a single bucket.

    The boto3 client is injected so tests can pass a mock.
    """

    def __init__(self, client, bucket: str):
        self._client = client
        self._bucket = bucket

    def presign_put(self, key: str, content_type: str, expires_seconds: int) -> str:
        try:
            return self._client.generate_presigned_url(
                "put_object",
                Params={"Bucket": self._bucket, "Key": key, "ContentType": content_type},
                ExpiresIn=expires_seconds,
                HttpMethod="PUT",
            )
        except (ClientError, BotoCoreError) as e:
            raise StorageError(f"failed to presign PUT object: {e}") from e

    def presign_get(self, key: str, expires_seconds: int) -> str:
        try:
            return self._client.generate_presigned_url(
                "get_object",
                Params={"Bucket": self._bucket, "Key": key},
                ExpiresIn=expires_seconds,
                HttpMethod="GET",
            )
        except (ClientError, BotoCoreError) as e:
            raise StorageError(f"failed to presign GET object: {e}") from e

    def head_object(self, key: str) -> ObjectInfo:
        try:
            response = self._client.head_object(Bucket=self._bucket, Key=key)
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code")
            if code in _NOT_FOUND_CODES:
                raise ObjectNotFoundError(key) from e
            raise StorageError(f"failed to head object: {e}") from e
        except BotoCoreError as e:
            raise StorageError(f"failed to head object: {e}") from e

        etag = response.get("ETag")
        return ObjectInfo(
            key=key,
            etag=etag.strip('"') if etag else None,
            size_bytes=response.get("ContentLength"),
            content_type=response.get("ContentType"),
        )


def create_s3_client(settings: Settings):
    """boto3 S3 client with static credentials and SigV4 signing."""
    return boto3.client(
        "s3",
        region_name=settings.aws_region,
        endpoint_url=settings.s3_endpoint_url or None,
        aws_access_key_id=settings.aws_access_key_id,
        aws_secret_access_key=settings.aws_secret_access_key,
        config=Config(signature_version="s3v4"),
    )


def build_storage_service(settings: Settings) -> S3StorageService | None:
    """
    Storage service for `settings`, or None when running metadata-only.

    Missing credentials or a client that cannot be built disable the
    object store instead of failing startup.
    """
    if not settings.object_store_enabled:
        logger.warning("AWS credentials not provided. Object store functionality will be disabled.")
        return None

    try:
        client = create_s3_client(settings)
    except (BotoCoreError, ValueError) as e:
        logger.warning(f"Failed to initialize S3 client: {e}")
        return None

    logger.info(f"Object store enabled: bucket={settings.s3_bucket} region={settings.aws_region}")
    return S3StorageService(client, settings.s3_bucket)
