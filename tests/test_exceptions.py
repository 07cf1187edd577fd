import logging
from unittest.mock import patch

import pytest

from media_uploader.core.exceptions import (
    ConfigurationError,
    DecodeError,
    IneligibleAssetError,
    MediaUploaderError,
    TransferError,
    batch_error_handler,
    with_error_handling,
)


@with_error_handling
def _fail_func() -> None:
    raise ValueError("boom")


@with_error_handling
def _fail_with_uploader_error() -> None:
    raise TransferError("store down")


def test_exception_hierarchy() -> None:
    for error_type in (IneligibleAssetError, DecodeError, TransferError, ConfigurationError):
        assert issubclass(error_type, MediaUploaderError)


def test_with_error_handling_wraps_foreign_errors() -> None:
    with pytest.raises(MediaUploaderError, match="boom") as exc_info:
        _fail_func()
    assert isinstance(exc_info.value.__cause__, ValueError)


def test_with_error_handling_passes_uploader_errors_through() -> None:
    with pytest.raises(TransferError, match="store down"):
        _fail_with_uploader_error()


def test_with_error_handling_logs_error() -> None:
    with patch("media_uploader.core.exceptions.get_logger") as mock_get_logger:
        mock_get_logger.return_value = logging.getLogger("test")
        with pytest.raises(MediaUploaderError):
            _fail_func()
        assert mock_get_logger.called


def test_batch_error_handler_wraps_foreign_errors() -> None:
    with pytest.raises(MediaUploaderError, match="kaput"):
        with batch_error_handler():
            raise RuntimeError("kaput")


def test_batch_error_handler_keeps_uploader_errors() -> None:
    with pytest.raises(DecodeError):
        with batch_error_handler():
            raise DecodeError("bad base64")
