"""Multithreaded processor implementation - uses a bounded thread pool."""

import time
from typing import List, Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed

from ..core import FailureKind, ImageAsset, UploadConfig, UploadOutcome
from ..core.services import AssetUploadService


def upload_batch(
    batch: Sequence[ImageAsset],
    upload_service: AssetUploadService,
    config: UploadConfig,
) -> List[UploadOutcome]:
    """
    Upload a batch of assets using multithreading.

    Args:
        batch: Assets to upload
        upload_service: Per-asset service; the store client it wraps is shared by all threads
        config: Upload configuration, `concurrency` bounds the pool size

    Returns:
        List of upload outcomes, sorted back into input order
    """
    if not batch:
        return []

    outcomes: List[UploadOutcome] = []
    max_workers = min(config.concurrency, len(batch))
    start_time = time.time()

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        future_to_index = {
            executor.submit(upload_service.upload_asset, index, asset): index
            for index, asset in enumerate(batch)
        }

        for future in as_completed(future_to_index):
            try:
                outcomes.append(future.result())
            except Exception as e:
                index = future_to_index[future]
                outcomes.append(
                    upload_service.failed(
                        index, batch[index], FailureKind.TRANSFER, e, start_time
                    )
                )

    outcomes.sort(key=lambda outcome: outcome.index)
    return outcomes
