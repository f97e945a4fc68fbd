"""
Blob store — file payloads kept in an S3-compatible bucket.

``BlobStore`` is the interface the card service depends on; ``S3BlobStore``
is the production implementation on top of a boto3 client.  boto3 is
synchronous, so every client call is pushed to Starlette's threadpool to
keep the event loop free while waiting on the network.

All botocore failures are re-raised as ``StorageError`` so callers deal with
a single exception type regardless of the underlying transport problem.
"""
import logging
from typing import Any, Protocol

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from starlette.concurrency import run_in_threadpool

from cards_api.config import Settings
from cards_api.exceptions import StorageError
from cards_api.schemas import UploadedFile

logger = logging.getLogger(__name__)

_MISSING_KEY_CODES = frozenset({"404", "NoSuchKey", "NotFound"})


class BlobStore(Protocol):
    """Abstract interface for card file storage."""

    async def upload_file(self, file: UploadedFile, key: str) -> None:
        """Store *file* under *key*, overwriting any existing object."""
        ...

    async def delete_file(self, key: str) -> None:
        """Delete the object at *key*; fails when it does not exist."""
        ...

    async def get_presigned_url(self, key: str) -> str:
        """Return a time-limited download URL for *key*."""
        ...


def build_s3_client(settings: Settings) -> Any:
    """Create a boto3 S3 client from application settings.

    Explicit credentials are optional; when absent boto3 falls back to its
    default chain (environment, shared config, instance role).
    """
    return boto3.client(
        "s3",
        region_name=settings.S3_REGION,
        endpoint_url=settings.S3_ENDPOINT_URL,
        aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
        aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
    )


class S3BlobStore:
    """S3-backed blob store."""

    def __init__(self, client: Any, bucket: str, url_expires: int = 3600) -> None:
        if not bucket:
            raise ValueError("S3_BUCKET config missing. Set S3_BUCKET to the bucket holding card files.")
        self.client = client
        self.bucket = bucket
        self.url_expires = url_expires

    @classmethod
    def from_settings(cls, settings: Settings) -> "S3BlobStore":
        return cls(
            build_s3_client(settings),
            settings.S3_BUCKET,
            url_expires=settings.PRESIGNED_URL_EXPIRES,
        )

    async def upload_file(self, file: UploadedFile, key: str) -> None:
        try:
            await run_in_threadpool(
                self.client.put_object,
                Bucket=self.bucket,
                Key=key,
                Body=file.content,
                ContentType=file.content_type,
            )
        except (ClientError, BotoCoreError) as exc:
            raise StorageError("upload", key, str(exc)) from exc
        logger.info("Uploaded %d byte(s) to s3://%s/%s", file.size, self.bucket, key)

    async def delete_file(self, key: str) -> None:
        # S3 DeleteObject succeeds on missing keys; check first so a dangling
        # key is reported instead of silently ignored.
        try:
            await run_in_threadpool(self.client.head_object, Bucket=self.bucket, Key=key)
        except ClientError as exc:
            code = exc.response.get("Error", {}).get("Code", "")
            if code in _MISSING_KEY_CODES:
                raise StorageError("delete", key, "object does not exist") from exc
            raise StorageError("delete", key, str(exc)) from exc
        except BotoCoreError as exc:
            raise StorageError("delete", key, str(exc)) from exc

        try:
            await run_in_threadpool(self.client.delete_object, Bucket=self.bucket, Key=key)
        except (ClientError, BotoCoreError) as exc:
            raise StorageError("delete", key, str(exc)) from exc
        logger.info("Deleted s3://%s/%s", self.bucket, key)

    async def get_presigned_url(self, key: str) -> str:
        try:
            return await run_in_threadpool(
                self.client.generate_presigned_url,
                "get_object",
                Params={"Bucket": self.bucket, "Key": key},
                ExpiresIn=self.url_expires,
            )
        except (ClientError, BotoCoreError) as exc:
            raise StorageError("presign", key, str(exc)) from exc
