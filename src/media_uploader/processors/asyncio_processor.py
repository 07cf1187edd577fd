"""AsyncIO processor implementation - uses async/await for concurrent uploads."""

import asyncio
import time
from typing import List, Optional, Sequence

import aioboto3

from ..core import (
    FailureKind,
    ImageAsset,
    UploadConfig,
    UploadOutcome,
    get_logger,
)
from ..core.exceptions import DecodeError, IneligibleAssetError
from ..core.factories import S3ClientFactory
from ..core.protocols import AsyncObjectStoreProtocol
from ..core.services import AssetUploadService
from ..core.storage import AsyncS3ObjectStore


async def _upload_asset(
    store: AsyncObjectStoreProtocol,
    upload_service: AssetUploadService,
    index: int,
    asset: ImageAsset,
    start_time: float,
) -> UploadOutcome:
    context = upload_service.log_context(index, asset)

    # File reads and base64 decoding block, so they run off the event loop
    try:
        prepared = await asyncio.to_thread(upload_service.prepare, index, asset, context)
    except IneligibleAssetError as e:
        return upload_service.failed(
            index, asset, FailureKind.INELIGIBLE, e, start_time, context=context
        )
    except DecodeError as e:
        return upload_service.failed(
            index, asset, FailureKind.DECODE, e, start_time, context=context
        )

    try:
        await store.put(prepared.key, prepared.payload, prepared.content_type)
    except Exception as e:
        return upload_service.failed(
            index,
            asset,
            FailureKind.TRANSFER,
            e,
            start_time,
            key=prepared.key,
            context=context,
        )

    return upload_service.succeeded(prepared, store.public_url(prepared.key), start_time)


async def upload_single_asset_async(
    store: AsyncObjectStoreProtocol,
    upload_service: AssetUploadService,
    index: int,
    asset: ImageAsset,
    semaphore: asyncio.Semaphore,
    item_timeout: float,
) -> UploadOutcome:
    """Upload one asset, bounded by the shared semaphore and a per-item timeout."""
    async with semaphore:
        start_time = time.time()
        try:
            return await asyncio.wait_for(
                _upload_asset(store, upload_service, index, asset, start_time),
                timeout=item_timeout,
            )
        except asyncio.TimeoutError:
            return upload_service.failed(
                index,
                asset,
                FailureKind.TIMEOUT,
                f"Upload did not finish within {item_timeout}s",
                start_time,
            )


async def _gather_outcomes(
    batch: Sequence[ImageAsset],
    upload_service: AssetUploadService,
    config: UploadConfig,
    store: AsyncObjectStoreProtocol,
) -> List[UploadOutcome]:
    semaphore = asyncio.Semaphore(config.concurrency)
    tasks = [
        upload_single_asset_async(
            store, upload_service, index, asset, semaphore, config.item_timeout
        )
        for index, asset in enumerate(batch)
    ]

    results = await asyncio.gather(*tasks, return_exceptions=True)

    # Convert exceptions to failed outcomes
    outcomes: List[UploadOutcome] = []
    for index, result in enumerate(results):
        if isinstance(result, Exception):
            outcomes.append(
                upload_service.failed(
                    index, batch[index], FailureKind.TRANSFER, result, time.time()
                )
            )
        else:
            outcomes.append(result)  # type: ignore[arg-type]

    return outcomes


async def upload_batch_async(
    batch: Sequence[ImageAsset],
    upload_service: AssetUploadService,
    config: UploadConfig,
    async_store: Optional[AsyncObjectStoreProtocol] = None,
) -> List[UploadOutcome]:
    """
    Upload a batch concurrently using one shared aioboto3 client.

    The whole batch can be cancelled by cancelling the awaiting task.
    """
    if not batch:
        return []

    if async_store is not None:
        return await _gather_outcomes(batch, upload_service, config, async_store)

    logger = get_logger("asyncio-uploader")
    logger.debug(f"Opening aioboto3 S3 client for {len(batch)} asset(s)")

    session = aioboto3.Session()
    async with session.client(  # type: ignore[reportUnknownMemberType,reportGeneralTypeIssues]
        "s3",
        config=S3ClientFactory.botocore_config(config),
        **S3ClientFactory.client_kwargs(config),
    ) as s3_client:
        store = AsyncS3ObjectStore(s3_client, config.bucket, config.region)
        return await _gather_outcomes(batch, upload_service, config, store)


def event_loop_running() -> bool:
    """Whether the calling thread is already inside a running event loop."""
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return False
    return True


def upload_batch(
    batch: Sequence[ImageAsset],
    upload_service: AssetUploadService,
    config: UploadConfig,
    async_store: Optional[AsyncObjectStoreProtocol] = None,
) -> List[UploadOutcome]:
    """
    Upload a batch of assets using asyncio.

    This is the synchronous wrapper that runs the async function, so it
    cannot be called from inside a running event loop; async callers await
    `upload_batch_async` instead. The service's own synchronous store is not
    used; uploads go through `async_store` or a fresh aioboto3 client.

    Args:
        batch: Assets to upload
        upload_service: Per-asset service used for validation and decoding
        config: Upload configuration
        async_store: Optional pre-built async store (used by tests)

    Returns:
        List of upload outcomes in input order
    """
    return asyncio.run(upload_batch_async(batch, upload_service, config, async_store))
