"""Protocol definitions for dependency injection and testability."""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Protocol, Sequence

from .models import ImageAsset, UploadBatchResult, UploadOutcome


class FileSystemProtocol(Protocol):
    """Read-only access to locally picked assets."""

    def exists(self, uri: str) -> bool:
        """Whether the handle resolves to a readable resource."""
        ...

    def read_as_encoded_text(self, uri: str) -> str:
        """Full contents of the resource as base64 text."""
        ...


class S3ClientProtocol(Protocol):
    """Protocol for the S3 client operations the uploader needs."""

    def put_object(
        self, Bucket: str, Key: str, Body: bytes, ContentType: str
    ) -> Dict[str, Any]:
        """Put object to S3."""
        ...


class ObjectStoreProtocol(Protocol):
    """Key-addressed binary storage."""

    def put(self, key: str, body: bytes, content_type: str) -> None:
        """Store bytes under a key, raising TransferError on failure."""
        ...

    def public_url(self, key: str) -> str:
        """Publicly addressable URL for a key."""
        ...


class AsyncObjectStoreProtocol(Protocol):
    """Awaitable variant of ObjectStoreProtocol."""

    async def put(self, key: str, body: bytes, content_type: str) -> None:
        """Store bytes under a key, raising TransferError on failure."""
        ...

    def public_url(self, key: str) -> str:
        """Publicly addressable URL for a key."""
        ...


class LoggerProtocol(Protocol):
    """Protocol for logging operations."""

    def debug(self, message: str, *args: Any, **kwargs: Any) -> None:
        """Log debug message."""
        ...

    def info(self, message: str, *args: Any, **kwargs: Any) -> None:
        """Log info message."""
        ...

    def warning(self, message: str, *args: Any, **kwargs: Any) -> None:
        """Log warning message."""
        ...

    def error(self, message: str, *args: Any, **kwargs: Any) -> None:
        """Log error message."""
        ...


class BatchUploader(ABC):
    """Abstract batch uploader."""

    @abstractmethod
    def upload_batch(self, assets: Sequence[ImageAsset]) -> List[UploadOutcome]:
        """Upload a batch of assets, returning one outcome per asset in input order."""
        ...


class MediaUploader(ABC):
    """Abstract entry point for uploading assets."""

    @abstractmethod
    def upload(self, assets: Sequence[ImageAsset]) -> List[str]:
        """Upload assets and return the URLs of the successful ones."""
        ...

    @abstractmethod
    def upload_with_outcomes(self, assets: Sequence[ImageAsset]) -> UploadBatchResult:
        """Upload assets and return a tagged outcome per asset."""
        ...
