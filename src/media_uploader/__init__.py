"""Batch upload of locally picked property photos to S3."""

from .core import FailureKind, ImageAsset, UploadBatchResult, UploadConfig, UploadOutcome
from .upload_images import (
    upload_property_images,
    upload_property_images_async,
    upload_property_images_with_outcomes,
    upload_property_images_with_outcomes_async,
)

__all__ = [
    "ImageAsset",
    "UploadConfig",
    "UploadOutcome",
    "UploadBatchResult",
    "FailureKind",
    "upload_property_images",
    "upload_property_images_with_outcomes",
    "upload_property_images_async",
    "upload_property_images_with_outcomes_async",
]
