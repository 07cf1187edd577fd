"""Batch uploaders with different concurrency strategies."""

from .serial import upload_batch as serial_upload_batch
from .multithread import upload_batch as multithread_upload_batch
from .asyncio_processor import upload_batch as asyncio_upload_batch

__all__ = [
    "serial_upload_batch",
    "multithread_upload_batch",
    "asyncio_upload_batch",
]
