# src/media_uploader/core/error_handling.py

import binascii
import functools
import logging

from botocore.exceptions import BotoCoreError, ClientError

from .exceptions import DecodeError, TransferError


def with_error_handling(func):
    """
    A decorator to wrap storage and decoding functions with standardized error handling.

    botocore failures become TransferError, malformed base64 becomes DecodeError,
    anything else is logged and re-raised unchanged.
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        logger = logging.getLogger(func.__module__ + '.' + func.__name__)
        try:
            return func(*args, **kwargs)
        except (TransferError, DecodeError):
            raise
        except (ClientError, BotoCoreError) as e:
            logger.error(f"S3 operation failed in '{func.__name__}': {e}")
            raise TransferError(f"S3 operation failed in {func.__name__}: {e}") from e
        except binascii.Error as e:
            logger.error(f"Malformed encoded content in '{func.__name__}': {e}")
            raise DecodeError(f"Malformed encoded content in {func.__name__}: {e}") from e
        except Exception as e:
            logger.error(
                f"Error in '{func.__name__}': {e}",
                exc_info=True
            )
            raise
    return wrapper


def s3_error_code(error: BaseException) -> str:
    """Return the S3 error code behind a TransferError, or an empty string."""
    cause = error.__cause__ if isinstance(error, TransferError) else error
    if isinstance(cause, ClientError):
        return cause.response.get('Error', {}).get('Code', '')
    return ''


class BatchOperationContextManager:
    """
    Context manager for batch operations to collect and summarize errors.
    """
    def __init__(self, operation_name="Batch Operation"):
        self.operation_name = operation_name
        self.errors = []
        self.logger = logging.getLogger(self.__class__.__module__ + '.' + self.__class__.__name__)

    def __enter__(self):
        self.logger.info(f"Starting {self.operation_name}.")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.errors:
            self.logger.warning(
                f"{self.operation_name} completed with {len(self.errors)} error(s)."
            )
            for i, error_detail in enumerate(self.errors):
                item_identifier = error_detail.get('item', 'Unknown item')
                error_message = error_detail.get('error', 'Unknown error')
                self.logger.error(
                    f"  Error {i+1}/{len(self.errors)} for item '{item_identifier}': {error_message}"
                )
        elif exc_type:
            self.logger.error(
                f"{self.operation_name} failed due to an unhandled exception: {exc_val}",
                exc_info=(exc_type, exc_val, exc_tb)
            )
        else:
            self.logger.info(f"{self.operation_name} completed successfully.")

        # Exceptions not reported through add_error propagate
        return False

    def add_error(self, error_message: str, item_identifier: str = "Unknown item"):
        """
        Call this method within the 'with' block to report an error for a specific item.

        Args:
            error_message (str): The error message or exception string.
            item_identifier (str): A string identifying the item that failed (e.g., file name, uri).
        """
        self.errors.append({"item": item_identifier, "error": str(error_message)})
        self.logger.debug(f"Error added for item '{item_identifier}' in {self.operation_name}: {error_message}")
