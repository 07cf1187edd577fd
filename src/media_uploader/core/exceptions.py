"""Custom exceptions and error handling utilities for the media uploader."""

from __future__ import annotations

from contextlib import contextmanager
from functools import wraps
from typing import Any, Callable, TypeVar

from .logging_config import get_logger


class MediaUploaderError(Exception):
    """Base exception for all media uploader errors."""


class IneligibleAssetError(MediaUploaderError):
    """Error raised when an asset fails validation."""


class DecodeError(MediaUploaderError):
    """Error raised when an asset's content cannot be read or decoded."""


class TransferError(MediaUploaderError):
    """Error raised for object store (S3) failures."""


class ConfigurationError(MediaUploaderError):
    """Error raised for invalid configuration options."""


F = TypeVar("F", bound=Callable[..., Any])


def with_error_handling(func: F) -> F:
    """Wrap a function so that unexpected errors surface as MediaUploaderError."""

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:  # type: ignore[override]
        logger = get_logger("uploader")
        try:
            return func(*args, **kwargs)
        except MediaUploaderError:
            logger.error("Uploader error", exc_info=True)
            raise
        except Exception as exc:  # noqa: BLE001
            logger.error(f"Unhandled error in {func.__name__}: {exc}", exc_info=True)
            raise MediaUploaderError(str(exc)) from exc

    return wrapper  # type: ignore[return-value]


@contextmanager
def batch_error_handler() -> Any:
    """Context manager that re-raises foreign exceptions as MediaUploaderError."""
    try:
        yield
    except MediaUploaderError:
        raise
    except Exception as exc:  # noqa: BLE001
        raise MediaUploaderError(str(exc)) from exc
