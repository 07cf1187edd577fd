"""Tests for core data models."""

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from media_uploader.core.exceptions import ConfigurationError
from media_uploader.core.models import (
    FailureKind,
    ImageAsset,
    PreparedUpload,
    UploadBatchResult,
    UploadConfig,
    UploadOutcome,
    ValidationResult,
)


class TestImageAsset:
    """Tests for ImageAsset model."""

    def test_minimal_asset(self):
        """Only the uri is required."""
        asset = ImageAsset(uri="file:///tmp/a.jpg")

        assert asset.uri == "file:///tmp/a.jpg"
        assert asset.file_name is None
        assert asset.mime_type is None
        assert asset.width is None

    def test_full_asset(self):
        """Test asset with picker metadata."""
        asset = ImageAsset(
            uri="file:///tmp/a.jpg",
            file_name="Front Yard.jpg",
            mime_type="image/jpeg",
            width=4032,
            height=3024,
            file_size=2_500_000,
        )

        assert asset.file_name == "Front Yard.jpg"
        assert asset.width == 4032
        assert asset.file_size == 2_500_000

    def test_asset_is_immutable(self):
        """Assets cannot be modified once built."""
        asset = ImageAsset(uri="file:///tmp/a.jpg", file_name="a.jpg")

        with pytest.raises(ValidationError):
            asset.file_name = "b.jpg"

    def test_uri_is_required(self):
        """Test that a missing uri fails validation."""
        with pytest.raises(ValidationError):
            ImageAsset(file_name="a.jpg")


class TestUploadConfig:
    """Tests for UploadConfig model."""

    def test_defaults(self):
        """Test default values."""
        config = UploadConfig(bucket="b", region="us-east-1")

        assert config.key_strategy == "name"
        assert config.concurrency == 4
        assert config.item_timeout == 30.0
        assert config.access_key_id is None
        assert config.endpoint_url is None
        assert config.debug is False

    @pytest.mark.parametrize(
        "overrides",
        [
            {"bucket": ""},
            {"region": ""},
            {"concurrency": 0},
            {"item_timeout": 0},
            {"key_strategy": "random"},
        ],
    )
    def test_invalid_values_rejected(self, overrides):
        """Test that invalid values fail validation."""
        values = {"bucket": "b", "region": "us-east-1", **overrides}

        with pytest.raises(ValidationError):
            UploadConfig(**values)

    def test_from_env(self):
        """Test building config from environment variables."""
        env = {
            "AWS_BUCKET_NAME": "listing-photos",
            "AWS_REGION": "eu-west-1",
            "AWS_ACCESS_KEY_ID": "AKIA123",
            "AWS_SECRET_ACCESS_KEY": "secret",
            "MEDIA_UPLOADER_CONCURRENCY": "8",
            "MEDIA_UPLOADER_ITEM_TIMEOUT": "12.5",
            "MEDIA_UPLOADER_KEY_STRATEGY": "content_hash",
        }
        with patch.dict(os.environ, env, clear=True):
            config = UploadConfig.from_env()

        assert config.bucket == "listing-photos"
        assert config.region == "eu-west-1"
        assert config.access_key_id == "AKIA123"
        assert config.secret_access_key == "secret"
        assert config.concurrency == 8
        assert config.item_timeout == 12.5
        assert config.key_strategy == "content_hash"

    def test_from_env_overrides_win(self):
        """Explicit overrides take precedence; None overrides are ignored."""
        env = {"AWS_BUCKET_NAME": "env-bucket", "AWS_REGION": "eu-west-1"}
        with patch.dict(os.environ, env, clear=True):
            config = UploadConfig.from_env(bucket="cli-bucket", region=None)

        assert config.bucket == "cli-bucket"
        assert config.region == "eu-west-1"

    def test_from_env_missing_bucket_raises_configuration_error(self):
        """Test that missing required values raise ConfigurationError."""
        with patch.dict(os.environ, {"AWS_REGION": "eu-west-1"}, clear=True):
            with pytest.raises(ConfigurationError, match="bucket"):
                UploadConfig.from_env()

    def test_from_env_invalid_number_raises_configuration_error(self):
        """Test that a non-numeric concurrency raises ConfigurationError."""
        env = {
            "AWS_BUCKET_NAME": "b",
            "AWS_REGION": "eu-west-1",
            "MEDIA_UPLOADER_CONCURRENCY": "lots",
        }
        with patch.dict(os.environ, env, clear=True):
            with pytest.raises(ConfigurationError):
                UploadConfig.from_env()


class TestUploadOutcome:
    """Tests for UploadOutcome and UploadBatchResult models."""

    def test_outcome_defaults(self):
        """Test that a bare outcome is a failure without details."""
        outcome = UploadOutcome(index=0)

        assert outcome.success is False
        assert outcome.url == ""
        assert outcome.failure is None
        assert outcome.error == ""
        assert outcome.processing_time == 0.0

    def test_failure_kind_serializes_as_value(self):
        """Test JSON dump of a failed outcome."""
        outcome = UploadOutcome(index=1, failure=FailureKind.DECODE, error="bad")

        dumped = outcome.model_dump(mode="json")

        assert dumped["failure"] == "decode"

    def test_batch_result_urls_only_successes_in_order(self):
        """Test that urls keep successful entries in input order."""
        result = UploadBatchResult(
            outcomes=[
                UploadOutcome(index=0, success=True, url="https://x/a.jpg"),
                UploadOutcome(index=1, failure=FailureKind.INELIGIBLE),
                UploadOutcome(index=2, success=True, url="https://x/c.jpg"),
            ]
        )

        assert result.urls == ["https://x/a.jpg", "https://x/c.jpg"]
        assert result.succeeded == 2
        assert result.failed == 1
        assert result.fatal_error == ""

    def test_empty_batch_result(self):
        """Test empty batch result."""
        result = UploadBatchResult()

        assert result.urls == []
        assert result.succeeded == 0
        assert result.failed == 0


class TestValidationAndPreparedUpload:
    """Tests for ValidationResult and PreparedUpload models."""

    def test_validation_result_defaults(self):
        """Test rejection without extension."""
        result = ValidationResult(eligible=False, reason="nope")

        assert result.extension is None
        assert result.reason == "nope"

    def test_prepared_upload_content_type(self):
        """Content type is image/<extension> exactly."""
        prepared = PreparedUpload(
            index=0,
            asset=ImageAsset(uri="file:///a.jpg", file_name="a.jpg"),
            extension="jpg",
            key="a.jpg",
            payload=b"\xff\xd8",
        )

        assert prepared.content_type == "image/jpg"
