"""Serial processor implementation - uploads assets one by one."""

from typing import List, Sequence

from ..core import ImageAsset, UploadConfig, UploadOutcome
from ..core.services import AssetUploadService, SerialBatchUploader


def upload_batch(
    batch: Sequence[ImageAsset],
    upload_service: AssetUploadService,
    config: UploadConfig,
) -> List[UploadOutcome]:
    """
    Uploads a batch of assets serially, one by one, in the current thread.

    Each asset is validated, decoded and uploaded before the next one starts,
    so outcomes come back in input order.

    Args:
        batch: The assets to upload.
        upload_service: Per-asset service shared by all strategies.
        config: `UploadConfig` for the batch (unused by the serial strategy).

    Returns:
        A list of `UploadOutcome` objects, one per asset.
    """
    return SerialBatchUploader(upload_service).upload_batch(batch)
