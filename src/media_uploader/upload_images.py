"""
Property image upload entry points.

Validates picked images → decodes them → uploads them to S3 and returns the
public URLs. Supports serial, multithread and asyncio strategies, plus an
awaitable variant for callers that already run an event loop.
"""

import functools
from typing import Dict, List, Optional, Sequence, Tuple

from .core import ImageAsset, UploadBatchResult, UploadConfig, get_logger
from .core.protocols import (
    AsyncObjectStoreProtocol,
    FileSystemProtocol,
    LoggerProtocol,
    S3ClientProtocol,
)
from .core.storage import S3ObjectStore, ThreadedAsyncObjectStore
from .processors import (
    asyncio_upload_batch,
    multithread_upload_batch,
    serial_upload_batch,
)
from .processors.asyncio_processor import event_loop_running
from .processors.common import UploadBatchFunction, run_upload, run_upload_async

PROCESSORS: Dict[str, Tuple[str, UploadBatchFunction]] = {
    "serial": ("Serial", serial_upload_batch),
    "multithread": ("Multithreaded", multithread_upload_batch),
    "asyncio": ("AsyncIO", asyncio_upload_batch),
}

# Strategies that upload through an awaitable store instead of the boto3 client
ASYNC_PROCESSORS = frozenset({"asyncio"})


def _threaded_store(
    s3_client: Optional[S3ClientProtocol], config: UploadConfig
) -> Optional[AsyncObjectStoreProtocol]:
    if s3_client is None:
        return None
    return ThreadedAsyncObjectStore(S3ObjectStore(s3_client, config.bucket, config.region))


def upload_property_images_with_outcomes(
    assets: Sequence[ImageAsset],
    config: Optional[UploadConfig] = None,
    processor: str = "serial",
    s3_client: Optional[S3ClientProtocol] = None,
    filesystem: Optional[FileSystemProtocol] = None,
    logger: Optional[LoggerProtocol] = None,
) -> UploadBatchResult:
    """
    Upload picked images and report a tagged outcome per image.

    Never raises: a missing configuration, an unknown processor or an
    asyncio processor requested from inside a running event loop gives an
    empty result whose `fatal_error` explains why.
    """
    run_logger = get_logger("uploader")

    if not assets:
        return UploadBatchResult()

    try:
        if config is None:
            config = UploadConfig.from_env()
        processor_name, upload_batch_fn = PROCESSORS[processor]
    except KeyError:
        run_logger.error(f"Unknown processor '{processor}'")
        return UploadBatchResult(fatal_error=f"Unknown processor '{processor}'")
    except Exception as e:  # noqa: BLE001
        run_logger.error(f"Upload configuration failed: {e}")
        return UploadBatchResult(fatal_error=str(e))

    if processor in ASYNC_PROCESSORS:
        if event_loop_running():
            message = (
                f"Processor '{processor}' cannot start inside a running event loop; "
                "await upload_property_images_async instead"
            )
            run_logger.error(message)
            return UploadBatchResult(fatal_error=message)

        async_store = _threaded_store(s3_client, config)
        if async_store is not None:
            upload_batch_fn = functools.partial(upload_batch_fn, async_store=async_store)
        return run_upload(
            assets,
            config,
            processor_name,
            upload_batch_fn,
            filesystem=filesystem,
            logger=logger,
            use_sync_store=False,
        )

    return run_upload(
        assets,
        config,
        processor_name,
        upload_batch_fn,
        s3_client=s3_client,
        filesystem=filesystem,
        logger=logger,
    )


def upload_property_images(
    assets: Sequence[ImageAsset],
    config: Optional[UploadConfig] = None,
    processor: str = "serial",
    s3_client: Optional[S3ClientProtocol] = None,
    filesystem: Optional[FileSystemProtocol] = None,
    logger: Optional[LoggerProtocol] = None,
) -> List[str]:
    """
    Upload picked images and return the URLs of those that made it.

    URLs are in input order; skipped or failed images are left out.
    """
    return upload_property_images_with_outcomes(
        assets,
        config=config,
        processor=processor,
        s3_client=s3_client,
        filesystem=filesystem,
        logger=logger,
    ).urls


async def upload_property_images_with_outcomes_async(
    assets: Sequence[ImageAsset],
    config: Optional[UploadConfig] = None,
    s3_client: Optional[S3ClientProtocol] = None,
    async_store: Optional[AsyncObjectStoreProtocol] = None,
    filesystem: Optional[FileSystemProtocol] = None,
    logger: Optional[LoggerProtocol] = None,
) -> UploadBatchResult:
    """
    Awaitable upload with the asyncio strategy on the caller's event loop.

    An injected `s3_client` is driven from worker threads; without one
    (and without `async_store`) an aioboto3 client is opened for the batch.
    """
    if not assets:
        return UploadBatchResult()

    try:
        if config is None:
            config = UploadConfig.from_env()
    except Exception as e:  # noqa: BLE001
        get_logger("uploader").error(f"Upload configuration failed: {e}")
        return UploadBatchResult(fatal_error=str(e))

    if async_store is None:
        async_store = _threaded_store(s3_client, config)

    return await run_upload_async(
        assets, config, async_store=async_store, filesystem=filesystem, logger=logger
    )


async def upload_property_images_async(
    assets: Sequence[ImageAsset],
    config: Optional[UploadConfig] = None,
    s3_client: Optional[S3ClientProtocol] = None,
    async_store: Optional[AsyncObjectStoreProtocol] = None,
    filesystem: Optional[FileSystemProtocol] = None,
    logger: Optional[LoggerProtocol] = None,
) -> List[str]:
    """Awaitable `upload_property_images`; URLs in input order."""
    result = await upload_property_images_with_outcomes_async(
        assets,
        config=config,
        s3_client=s3_client,
        async_store=async_store,
        filesystem=filesystem,
        logger=logger,
    )
    return result.urls
