"""Testing utilities and fakes for the media uploader."""

from .fakes import (
    FakeAsyncObjectStore,
    FakeFileSystem,
    FakeLogger,
    FakeS3Client,
    S3Bucket,
    S3Object,
    create_test_image,
    setup_test_upload_environment,
)

__all__ = [
    "FakeS3Client",
    "FakeAsyncObjectStore",
    "FakeFileSystem",
    "FakeLogger",
    "S3Object",
    "S3Bucket",
    "create_test_image",
    "setup_test_upload_environment",
]
