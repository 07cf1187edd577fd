"""Factory classes for creating configured service instances."""

import logging
from typing import Any, Optional

import boto3
from botocore.config import Config

from .exceptions import ConfigurationError
from .filesystem import LocalFileSystem
from .models import UploadConfig
from .observability import LogContext, MetricsCollector, format_log_message
from .protocols import (
    FileSystemProtocol,
    LoggerProtocol,
    ObjectStoreProtocol,
    S3ClientProtocol,
)
from .services import (
    AssetUploadService,
    AssetValidator,
    ContentDecoder,
    MediaUploadOrchestrator,
    RemoteUploader,
    SerialBatchUploader,
)
from .storage import S3ObjectStore


class LoggerAdapter:
    """Adapter to make a standard logger compatible with LoggerProtocol."""

    def __init__(self, logger: logging.Logger):
        self._logger = logger

    def _render(self, message: str, context: Optional[LogContext], **kwargs: Any) -> str:
        return format_log_message(message, context, **kwargs)

    def debug(self, message: str, context: Optional[LogContext] = None, **kwargs: Any) -> None:
        """Log debug message."""
        self._logger.debug(self._render(message, context, **kwargs))

    def info(self, message: str, context: Optional[LogContext] = None, **kwargs: Any) -> None:
        """Log info message."""
        self._logger.info(self._render(message, context, **kwargs))

    def warning(self, message: str, context: Optional[LogContext] = None, **kwargs: Any) -> None:
        """Log warning message."""
        self._logger.warning(self._render(message, context, **kwargs))

    def error(self, message: str, context: Optional[LogContext] = None, **kwargs: Any) -> None:
        """Log error message."""
        self._logger.error(self._render(message, context, **kwargs))


class LoggerFactory:
    """Factory for creating logger instances."""

    @staticmethod
    def create_logger(name: str, level: int = logging.INFO) -> LoggerProtocol:
        """Create a configured logger instance."""
        logger = logging.getLogger(name)
        logger.setLevel(level)

        if not logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            )
            handler.setFormatter(formatter)
            logger.addHandler(handler)

        return LoggerAdapter(logger)

    @staticmethod
    def create_service_logger(config: UploadConfig) -> LoggerProtocol:
        """The pipeline's service logger, at DEBUG when the config asks for it."""
        level = logging.DEBUG if config.debug else logging.INFO
        return LoggerFactory.create_logger("media_uploader", level)


class S3ClientFactory:
    """Factory for creating S3 client instances."""

    @staticmethod
    def client_kwargs(config: UploadConfig) -> dict:
        """Keyword arguments shared by the boto3 and aioboto3 clients."""
        kwargs: dict = {"region_name": config.region}
        if config.access_key_id and config.secret_access_key:
            kwargs["aws_access_key_id"] = config.access_key_id
            kwargs["aws_secret_access_key"] = config.secret_access_key
        elif config.access_key_id or config.secret_access_key:
            raise ConfigurationError(
                "Both access_key_id and secret_access_key must be set, or neither"
            )
        if config.endpoint_url:
            kwargs["endpoint_url"] = config.endpoint_url
        return kwargs

    @staticmethod
    def botocore_config(config: UploadConfig) -> Config:
        """Per-request timeouts, no botocore-level retries."""
        return Config(
            connect_timeout=config.item_timeout,
            read_timeout=config.item_timeout,
            retries={"max_attempts": 1, "mode": "standard"},
        )

    @staticmethod
    def create_s3_client(config: UploadConfig) -> S3ClientProtocol:
        """Create an S3 client for the configured region and credentials."""
        session = boto3.Session()
        return session.client(  # type: ignore
            "s3",
            config=S3ClientFactory.botocore_config(config),
            **S3ClientFactory.client_kwargs(config),
        )


class UploadPipelineFactory:
    """Factory for creating the complete upload pipeline."""

    @staticmethod
    def create_upload_service(
        config: UploadConfig,
        store: Optional[ObjectStoreProtocol],
        filesystem: Optional[FileSystemProtocol] = None,
        logger: Optional[LoggerProtocol] = None,
        metrics_collector: Optional[MetricsCollector] = None,
    ) -> AssetUploadService:
        """Create the per-asset service shared by every batch strategy."""
        if filesystem is None:
            filesystem = LocalFileSystem()

        if logger is None:
            logger = LoggerFactory.create_service_logger(config)

        return AssetUploadService(
            validator=AssetValidator(filesystem, logger),
            decoder=ContentDecoder(filesystem),
            uploader=RemoteUploader(store) if store is not None else None,
            logger=logger,
            key_strategy=config.key_strategy,
            metrics_collector=metrics_collector,
        )

    @staticmethod
    def create_pipeline(
        config: UploadConfig,
        s3_client: Optional[S3ClientProtocol] = None,
        store: Optional[ObjectStoreProtocol] = None,
        filesystem: Optional[FileSystemProtocol] = None,
        logger: Optional[LoggerProtocol] = None,
        metrics_collector: Optional[MetricsCollector] = None,
    ) -> MediaUploadOrchestrator:
        """Create a fully configured serial upload pipeline."""
        if store is None:
            if s3_client is None:
                s3_client = S3ClientFactory.create_s3_client(config)
            store = S3ObjectStore(s3_client, config.bucket, config.region)

        if logger is None:
            logger = LoggerFactory.create_service_logger(config)

        upload_service = UploadPipelineFactory.create_upload_service(
            config, store, filesystem, logger, metrics_collector
        )

        return MediaUploadOrchestrator(
            batch_uploader=SerialBatchUploader(upload_service),
            logger=logger,
            key_strategy=config.key_strategy,
        )
