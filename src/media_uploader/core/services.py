"""Service implementations for the media upload pipeline."""

import base64
import binascii
import time
from collections import Counter
from typing import List, Optional, Sequence, Union

from .error_handling import BatchOperationContextManager, s3_error_code
from .exceptions import (
    DecodeError,
    IneligibleAssetError,
    MediaUploaderError,
    TransferError,
    batch_error_handler,
)
from .keys import (
    derive_content_hash_key,
    derive_upload_key,
    file_extension,
    is_allowed_extension,
)
from .models import (
    FailureKind,
    ImageAsset,
    PreparedUpload,
    UploadBatchResult,
    UploadOutcome,
    ValidationResult,
)
from .observability import LogContext, MetricsCollector, PerformanceMetrics
from .protocols import (
    BatchUploader,
    FileSystemProtocol,
    LoggerProtocol,
    MediaUploader,
    ObjectStoreProtocol,
)


class AssetValidator:
    """Decides whether an asset can be uploaded. Never raises on rejection."""

    def __init__(self, filesystem: FileSystemProtocol, logger: LoggerProtocol):
        self._filesystem = filesystem
        self._logger = logger

    def validate(
        self, asset: Optional[ImageAsset], context: Optional[LogContext] = None
    ) -> ValidationResult:
        """Run the presence, extension and existence checks in that order."""
        result = self._check(asset)
        if not result.eligible:
            self._logger.warning(f"Skipping asset: {result.reason}", context)
        return result

    def _check(self, asset: Optional[ImageAsset]) -> ValidationResult:
        if asset is None or not asset.uri:
            return ValidationResult(eligible=False, reason="asset has no resource handle")

        extension = file_extension(asset.file_name)
        if not is_allowed_extension(extension):
            return ValidationResult(
                eligible=False,
                reason=f"unsupported extension {extension!r} for {asset.file_name!r}",
            )

        try:
            exists = self._filesystem.exists(asset.uri)
        except Exception as e:  # noqa: BLE001
            self._logger.debug(f"Existence check raised for {asset.uri}: {e}")
            exists = False
        if not exists:
            return ValidationResult(
                eligible=False, reason=f"resource {asset.uri!r} does not exist"
            )

        return ValidationResult(eligible=True, extension=extension)


class ContentDecoder:
    """Reads an asset as base64 text and decodes it to raw bytes."""

    def __init__(self, filesystem: FileSystemProtocol):
        self._filesystem = filesystem

    def decode(self, asset: ImageAsset) -> bytes:
        try:
            encoded = self._filesystem.read_as_encoded_text(asset.uri)
        except Exception as e:  # noqa: BLE001
            raise DecodeError(f"Could not read {asset.uri!r}: {e}") from e

        return decode_base64_payload(encoded, asset.uri)


def decode_base64_payload(encoded: Optional[str], source: str = "asset") -> bytes:
    """
    Decode base64 transport text into bytes.

    Whitespace (line wrapping) is ignored; the alphabet and padding are
    validated strictly. Empty input or an empty payload is a DecodeError.
    """
    if not encoded:
        raise DecodeError(f"No data read from {source!r}")

    compact = "".join(encoded.split())
    try:
        payload = base64.b64decode(compact, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeError(f"Malformed base64 content in {source!r}: {e}") from e

    if not payload:
        raise DecodeError(f"Decoded payload of {source!r} is empty")
    return payload


class RemoteUploader:
    """Pushes one payload to the object store and returns its public URL."""

    def __init__(self, store: ObjectStoreProtocol):
        self._store = store

    def upload(self, key: str, payload: bytes, extension: str) -> str:
        try:
            self._store.put(key, payload, f"image/{extension}")
        except TransferError:
            raise
        except Exception as e:  # noqa: BLE001
            raise TransferError(f"Upload of {key!r} failed: {e}") from e
        return self._store.public_url(key)


class AssetUploadService:
    """Runs one asset through validation, decoding and upload."""

    def __init__(
        self,
        validator: AssetValidator,
        decoder: ContentDecoder,
        uploader: Optional[RemoteUploader],
        logger: LoggerProtocol,
        key_strategy: str = "name",
        metrics_collector: Optional[MetricsCollector] = None,
    ):
        self._validator = validator
        self._decoder = decoder
        self._uploader = uploader
        self._logger = logger
        self._key_strategy = key_strategy
        self._metrics_collector = metrics_collector

    def log_context(self, index: int, asset: Optional[ImageAsset]) -> LogContext:
        return LogContext(
            correlation_id=f"asset_{index}_{int(time.time() * 1000)}",
            operation="upload_asset",
            component="asset_upload_service",
        ).with_metadata(
            index=index,
            uri=asset.uri if asset else None,
            file_name=asset.file_name if asset else None,
        )

    def derive_key(self, file_name: str, payload: bytes) -> str:
        if self._key_strategy == "content_hash":
            return derive_content_hash_key(file_name, payload)
        return derive_upload_key(file_name)

    def prepare(
        self,
        index: int,
        asset: Optional[ImageAsset],
        context: Optional[LogContext] = None,
    ) -> PreparedUpload:
        """
        Validate and decode an asset.

        Raises:
            IneligibleAssetError: the asset failed validation
            DecodeError: the asset's content could not be read or decoded
        """
        context = context or self.log_context(index, asset)

        validation = self._validator.validate(asset, context.with_operation("validate"))
        if not validation.eligible:
            raise IneligibleAssetError(validation.reason)

        self._logger.debug("Decoding asset", context.with_operation("decode"))
        payload = self._decoder.decode(asset)

        return PreparedUpload(
            index=index,
            asset=asset,
            extension=validation.extension,
            key=self.derive_key(asset.file_name, payload),
            payload=payload,
        )

    def succeeded(
        self, prepared: PreparedUpload, url: str, start_time: float
    ) -> UploadOutcome:
        outcome = UploadOutcome(
            index=prepared.index,
            uri=prepared.asset.uri,
            file_name=prepared.asset.file_name,
            key=prepared.key,
            url=url,
            success=True,
            processing_time=time.time() - start_time,
        )
        self._record(outcome, start_time)
        return outcome

    def failed(
        self,
        index: int,
        asset: Optional[ImageAsset],
        failure: FailureKind,
        error: Union[BaseException, str],
        start_time: float,
        key: str = "",
        context: Optional[LogContext] = None,
    ) -> UploadOutcome:
        outcome = UploadOutcome(
            index=index,
            uri=asset.uri if asset else "",
            file_name=asset.file_name if asset else None,
            key=key,
            failure=failure,
            error=str(error),
            processing_time=time.time() - start_time,
        )
        if failure is not FailureKind.INELIGIBLE:
            error_context = (context or self.log_context(index, asset)).with_metadata(
                failure=failure.value, error=str(error)
            )
            code = s3_error_code(error) if isinstance(error, BaseException) else ""
            if code:
                error_context = error_context.with_metadata(s3_error_code=code)
            self._logger.error("Asset upload failed", error_context)
        self._record(outcome, start_time)
        return outcome

    def upload_asset(self, index: int, asset: Optional[ImageAsset]) -> UploadOutcome:
        """Upload a single asset. Failures are returned, never raised."""
        start_time = time.time()
        context = self.log_context(index, asset)
        prepared: Optional[PreparedUpload] = None

        try:
            prepared = self.prepare(index, asset, context)

            if self._uploader is None:
                raise TransferError("No object store configured")

            upload_context = context.with_operation("upload").with_metadata(key=prepared.key)
            self._logger.debug("Uploading asset", upload_context)
            url = self._uploader.upload(prepared.key, prepared.payload, prepared.extension)

            outcome = self.succeeded(prepared, url, start_time)
            self._logger.info(
                "Uploaded asset",
                upload_context,
                processing_time_ms=outcome.processing_time * 1000,
            )
            return outcome

        except IneligibleAssetError as e:
            return self.failed(index, asset, FailureKind.INELIGIBLE, e, start_time, context=context)
        except DecodeError as e:
            return self.failed(index, asset, FailureKind.DECODE, e, start_time, context=context)
        except Exception as e:  # noqa: BLE001
            key = prepared.key if prepared else ""
            return self.failed(
                index, asset, FailureKind.TRANSFER, e, start_time, key=key, context=context
            )

    def _record(self, outcome: UploadOutcome, start_time: float) -> None:
        if self._metrics_collector is None:
            return
        self._metrics_collector.record_metric(
            PerformanceMetrics(
                operation="upload_asset",
                start_time=start_time,
                end_time=start_time + outcome.processing_time,
                success=outcome.success,
                error_message=outcome.error or None,
                metadata={"index": outcome.index, "failure": outcome.failure},
            )
        )


class SerialBatchUploader(BatchUploader):
    """Uploads assets one at a time, in input order."""

    def __init__(self, upload_service: AssetUploadService):
        self._upload_service = upload_service

    def upload_batch(self, assets: Sequence[ImageAsset]) -> List[UploadOutcome]:
        return [
            self._upload_service.upload_asset(index, asset)
            for index, asset in enumerate(assets)
        ]


def find_duplicate_keys(assets: Sequence[Optional[ImageAsset]]) -> List[str]:
    """Keys that more than one named asset in the batch would be stored under."""
    keys = Counter(
        derive_upload_key(asset.file_name)
        for asset in assets
        if asset is not None and asset.file_name
    )
    return sorted(key for key, count in keys.items() if count > 1)


def warn_duplicate_keys(
    assets: Sequence[Optional[ImageAsset]], logger: LoggerProtocol
) -> None:
    for key in find_duplicate_keys(assets):
        logger.warning(
            f"Several assets map to key '{key}'; later uploads overwrite earlier ones"
        )


class MediaUploadOrchestrator(MediaUploader):
    """Main entry point: uploads a batch and reports the successful URLs."""

    def __init__(
        self,
        batch_uploader: BatchUploader,
        logger: LoggerProtocol,
        key_strategy: str = "name",
    ):
        self._batch_uploader = batch_uploader
        self._logger = logger
        self._key_strategy = key_strategy

    def upload(self, assets: Sequence[ImageAsset]) -> List[str]:
        """Upload assets; returns URLs of the successful ones in input order."""
        return self.upload_with_outcomes(assets).urls

    def upload_with_outcomes(self, assets: Sequence[ImageAsset]) -> UploadBatchResult:
        """Upload assets; returns one tagged outcome per asset."""
        if not assets:
            self._logger.info("No assets to upload")
            return UploadBatchResult()

        try:
            with batch_error_handler():
                return self._run(assets)
        except MediaUploaderError as e:
            self._logger.error(f"Batch upload aborted, returning empty result: {e}")
            return UploadBatchResult(fatal_error=str(e))

    def _run(self, assets: Sequence[ImageAsset]) -> UploadBatchResult:
        if self._key_strategy == "name":
            warn_duplicate_keys(assets, self._logger)

        with BatchOperationContextManager(
            operation_name=f"Upload of {len(assets)} asset(s)"
        ) as batch_manager:
            outcomes = sorted(
                self._batch_uploader.upload_batch(assets), key=lambda o: o.index
            )
            for outcome in outcomes:
                if not outcome.success:
                    batch_manager.add_error(
                        f"{outcome.failure.value if outcome.failure else 'unknown'}: {outcome.error}",
                        item_identifier=outcome.file_name or outcome.uri or f"#{outcome.index}",
                    )

        result = UploadBatchResult(outcomes=outcomes)
        self._logger.info(
            f"Uploaded {result.succeeded}/{len(assets)} asset(s), {result.failed} skipped"
        )
        return result
