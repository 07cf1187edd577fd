"""Core utilities and shared components for the media uploader."""

from .keys import (
    ALLOWED_EXTENSIONS,
    build_public_url,
    derive_content_hash_key,
    derive_upload_key,
    file_extension,
)
from .logging_config import (
    configure_cli_logging,
    get_logger,
    setup_logger,
)
from .exceptions import (
    MediaUploaderError,
    IneligibleAssetError,
    DecodeError,
    TransferError,
    ConfigurationError,
    with_error_handling,
    batch_error_handler,
)
from .models import (
    FailureKind,
    ImageAsset,
    UploadBatchResult,
    UploadConfig,
    UploadOutcome,
)

__all__ = [
    "ImageAsset",
    "UploadConfig",
    "UploadOutcome",
    "UploadBatchResult",
    "FailureKind",
    "ALLOWED_EXTENSIONS",
    "build_public_url",
    "derive_content_hash_key",
    "derive_upload_key",
    "file_extension",
    "setup_logger",
    "get_logger",
    "configure_cli_logging",
    "MediaUploaderError",
    "IneligibleAssetError",
    "DecodeError",
    "TransferError",
    "ConfigurationError",
    "with_error_handling",
    "batch_error_handler",
]
