"""Common functions shared across all processor implementations."""

import time
from typing import Callable, List, Optional, Sequence

from ..core import (
    ImageAsset,
    UploadBatchResult,
    UploadConfig,
    UploadOutcome,
    get_logger,
)
from ..core.factories import LoggerFactory, S3ClientFactory, UploadPipelineFactory
from ..core.observability import MetricsCollector
from ..core.protocols import (
    AsyncObjectStoreProtocol,
    BatchUploader,
    FileSystemProtocol,
    LoggerProtocol,
    S3ClientProtocol,
)
from ..core.services import (
    AssetUploadService,
    MediaUploadOrchestrator,
    warn_duplicate_keys,
)
from ..core.storage import S3ObjectStore
from .asyncio_processor import upload_batch_async

UploadBatchFunction = Callable[
    [Sequence[ImageAsset], AssetUploadService, UploadConfig], List[UploadOutcome]
]


class StrategyBatchUploader(BatchUploader):
    """Adapts a processor's `upload_batch` function to the BatchUploader interface."""

    def __init__(
        self,
        upload_batch_fn: UploadBatchFunction,
        upload_service: AssetUploadService,
        config: UploadConfig,
    ):
        self._upload_batch_fn = upload_batch_fn
        self._upload_service = upload_service
        self._config = config

    def upload_batch(self, assets: Sequence[ImageAsset]) -> List[UploadOutcome]:
        return self._upload_batch_fn(assets, self._upload_service, self._config)


def log_configuration(config: UploadConfig, processor_name: str, asset_count: int):
    """Log upload configuration."""
    logger = get_logger("uploader")
    logger.info("=" * 80)
    logger.info(f"{processor_name.upper()} MEDIA UPLOADER")
    logger.info("=" * 80)
    logger.info("CONFIGURATION:")
    logger.info(f"  Destination:   s3://{config.bucket} ({config.region})")
    if config.endpoint_url:
        logger.info(f"  Endpoint:      {config.endpoint_url}")
    logger.info(f"  Key strategy:  {config.key_strategy}")
    logger.info(f"  Concurrency:   {config.concurrency}")
    logger.info(f"  Item timeout:  {config.item_timeout:.1f}s")
    logger.info(f"  Assets:        {asset_count}")
    logger.info("=" * 80)


def log_final_statistics(
    total_time: float,
    result: UploadBatchResult,
    metrics_collector: Optional[MetricsCollector] = None,
):
    """Log final upload statistics."""
    logger = get_logger("uploader")
    total_items = len(result.outcomes)
    overall_rate = total_items / total_time if total_time > 0 else 0

    logger.info("=" * 80)
    logger.info("UPLOAD COMPLETED")
    logger.info("=" * 80)
    logger.info(f"Total execution time: {total_time:.1f}s")
    logger.info(f"Overall rate: {overall_rate:.1f} assets/sec")
    logger.info(f"Uploaded: {result.succeeded}")
    logger.info(f"Skipped: {result.failed}")
    summary = metrics_collector.get_summary("upload_asset") if metrics_collector else {}
    if summary:
        logger.info(
            f"Per-asset time: avg {summary['avg_duration'] * 1000:.0f}ms, "
            f"max {summary['max_duration'] * 1000:.0f}ms"
        )
    for outcome in result.outcomes:
        if not outcome.success:
            kind = outcome.failure.value if outcome.failure else "unknown"
            logger.info(f"  [{kind}] {outcome.file_name or outcome.uri}: {outcome.error}")
    logger.info("=" * 80)


def run_upload(
    assets: Sequence[ImageAsset],
    config: UploadConfig,
    processor_name: str,
    upload_batch_fn: UploadBatchFunction,
    s3_client: Optional[S3ClientProtocol] = None,
    filesystem: Optional[FileSystemProtocol] = None,
    logger: Optional[LoggerProtocol] = None,
    metrics_collector: Optional[MetricsCollector] = None,
    use_sync_store: bool = True,
) -> UploadBatchResult:
    """
    Upload a batch with the given strategy, never raising.

    Failing to build the store client or the pipeline yields an empty
    result with `fatal_error` set. Strategies that bring their own store
    (asyncio) pass `use_sync_store=False` so no boto3 client is built.
    """
    run_logger = get_logger("uploader")

    if not assets:
        run_logger.info("No assets to upload.")
        return UploadBatchResult()

    log_configuration(config, processor_name, len(assets))
    start_time = time.time()
    if metrics_collector is None:
        metrics_collector = MetricsCollector()

    try:
        store = None
        if use_sync_store:
            if s3_client is None:
                s3_client = S3ClientFactory.create_s3_client(config)
            store = S3ObjectStore(s3_client, config.bucket, config.region)

        if logger is None:
            logger = LoggerFactory.create_service_logger(config)

        upload_service = UploadPipelineFactory.create_upload_service(
            config, store, filesystem, logger, metrics_collector
        )
        orchestrator = MediaUploadOrchestrator(
            batch_uploader=StrategyBatchUploader(upload_batch_fn, upload_service, config),
            logger=logger,
            key_strategy=config.key_strategy,
        )
    except Exception as e:  # noqa: BLE001
        run_logger.error(
            f"Could not set up {processor_name} upload pipeline: {e}", exc_info=True
        )
        return UploadBatchResult(fatal_error=str(e))

    result = orchestrator.upload_with_outcomes(assets)

    log_final_statistics(time.time() - start_time, result, metrics_collector)
    return result


async def run_upload_async(
    assets: Sequence[ImageAsset],
    config: UploadConfig,
    async_store: Optional[AsyncObjectStoreProtocol] = None,
    filesystem: Optional[FileSystemProtocol] = None,
    logger: Optional[LoggerProtocol] = None,
    metrics_collector: Optional[MetricsCollector] = None,
) -> UploadBatchResult:
    """
    Awaitable counterpart of `run_upload` for callers already on an event loop.

    Uploads go through `async_store`, or an aioboto3 client opened for the
    batch. Never raises, except for cancellation of the awaiting task.
    """
    run_logger = get_logger("uploader")

    if not assets:
        run_logger.info("No assets to upload.")
        return UploadBatchResult()

    log_configuration(config, "AsyncIO", len(assets))
    start_time = time.time()
    if metrics_collector is None:
        metrics_collector = MetricsCollector()

    try:
        if logger is None:
            logger = LoggerFactory.create_service_logger(config)
        upload_service = UploadPipelineFactory.create_upload_service(
            config, None, filesystem, logger, metrics_collector
        )
        if config.key_strategy == "name":
            warn_duplicate_keys(assets, logger)

        outcomes = await upload_batch_async(assets, upload_service, config, async_store)
    except Exception as e:  # noqa: BLE001
        run_logger.error(f"AsyncIO upload aborted, returning empty result: {e}", exc_info=True)
        return UploadBatchResult(fatal_error=str(e))

    result = UploadBatchResult(outcomes=sorted(outcomes, key=lambda o: o.index))

    log_final_statistics(time.time() - start_time, result, metrics_collector)
    return result
