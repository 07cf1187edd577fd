"""S3 object store adapters."""

import asyncio
from typing import Any, Dict

from botocore.exceptions import BotoCoreError, ClientError

from .error_handling import with_error_handling
from .exceptions import TransferError
from .keys import build_public_url
from .protocols import ObjectStoreProtocol, S3ClientProtocol


def _check_response(response: Dict[str, Any], key: str) -> None:
    status = (response or {}).get("ResponseMetadata", {}).get("HTTPStatusCode", 200)
    if not 200 <= status < 300:
        raise TransferError(f"Store rejected '{key}' with HTTP status {status}")


class S3ObjectStore:
    """Object store backed by a boto3 S3 client."""

    def __init__(self, s3_client: S3ClientProtocol, bucket: str, region: str):
        self._s3_client = s3_client
        self.bucket = bucket
        self.region = region

    @with_error_handling
    def put(self, key: str, body: bytes, content_type: str) -> None:
        """Single put_object call; no multipart, no retries."""
        response = self._s3_client.put_object(
            Bucket=self.bucket,
            Key=key,
            Body=body,
            ContentType=content_type,
        )
        _check_response(response, key)

    def public_url(self, key: str) -> str:
        return build_public_url(self.bucket, self.region, key)


class AsyncS3ObjectStore:
    """Object store backed by an aioboto3 S3 client."""

    def __init__(self, s3_client: Any, bucket: str, region: str):
        self._s3_client = s3_client
        self.bucket = bucket
        self.region = region

    async def put(self, key: str, body: bytes, content_type: str) -> None:
        try:
            response = await self._s3_client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=body,
                ContentType=content_type,
            )
        except (ClientError, BotoCoreError) as e:
            raise TransferError(f"S3 operation failed in put: {e}") from e
        _check_response(response, key)

    def public_url(self, key: str) -> str:
        return build_public_url(self.bucket, self.region, key)


class ThreadedAsyncObjectStore:
    """Awaitable facade over a synchronous store; each put runs in a worker thread."""

    def __init__(self, store: ObjectStoreProtocol):
        self._store = store

    async def put(self, key: str, body: bytes, content_type: str) -> None:
        await asyncio.to_thread(self._store.put, key, body, content_type)

    def public_url(self, key: str) -> str:
        return self._store.public_url(key)
