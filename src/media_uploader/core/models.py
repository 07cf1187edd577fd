"""Shared data models for the media uploader."""

import os
from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .exceptions import ConfigurationError


class ImageAsset(BaseModel):
    """A locally picked image, as handed over by the caller."""

    model_config = ConfigDict(frozen=True)

    uri: str
    file_name: Optional[str] = None
    mime_type: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    file_size: Optional[int] = None


class FailureKind(str, Enum):
    """Why an asset did not produce a URL."""

    INELIGIBLE = "ineligible"
    DECODE = "decode"
    TRANSFER = "transfer"
    TIMEOUT = "timeout"
    CATASTROPHIC = "catastrophic"


KeyStrategy = Literal["name", "content_hash"]

_ENV_FIELDS = {
    "bucket": "AWS_BUCKET_NAME",
    "region": "AWS_REGION",
    "access_key_id": "AWS_ACCESS_KEY_ID",
    "secret_access_key": "AWS_SECRET_ACCESS_KEY",
    "endpoint_url": "AWS_ENDPOINT_URL",
    "key_strategy": "MEDIA_UPLOADER_KEY_STRATEGY",
    "concurrency": "MEDIA_UPLOADER_CONCURRENCY",
    "item_timeout": "MEDIA_UPLOADER_ITEM_TIMEOUT",
}


class UploadConfig(BaseModel):
    """Configuration for an upload job."""

    bucket: str = Field(min_length=1)
    region: str = Field(min_length=1)
    access_key_id: Optional[str] = None
    secret_access_key: Optional[str] = None
    endpoint_url: Optional[str] = None
    key_strategy: KeyStrategy = "name"
    concurrency: int = Field(default=4, ge=1)
    item_timeout: float = Field(default=30.0, gt=0)
    debug: bool = False

    @classmethod
    def from_env(cls, **overrides: Any) -> "UploadConfig":
        """
        Build a configuration from environment variables.

        Keyword overrides that are not None take precedence over the
        environment. Invalid or missing required values raise
        ConfigurationError.
        """
        values: Dict[str, Any] = {}
        for field_name, env_name in _ENV_FIELDS.items():
            env_value = os.getenv(env_name)
            if env_value:
                values[field_name] = env_value

        values.update({k: v for k, v in overrides.items() if v is not None})

        try:
            return cls(**values)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid upload configuration: {exc}") from exc


class ValidationResult(BaseModel):
    """Eligibility decision for a single asset."""

    eligible: bool
    reason: str = ""
    extension: Optional[str] = None


class PreparedUpload(BaseModel):
    """An asset that passed validation and decoding, ready for transfer."""

    index: int
    asset: ImageAsset
    extension: str
    key: str
    payload: bytes

    @property
    def content_type(self) -> str:
        return f"image/{self.extension}"


class UploadOutcome(BaseModel):
    """Result of uploading a single asset."""

    index: int
    uri: str = ""
    file_name: Optional[str] = None
    key: str = ""
    url: str = ""
    success: bool = False
    failure: Optional[FailureKind] = None
    error: str = ""
    processing_time: float = 0.0


class UploadBatchResult(BaseModel):
    """Outcomes of one batch, ordered by input position."""

    outcomes: List[UploadOutcome] = Field(default_factory=list)
    fatal_error: str = ""

    @property
    def urls(self) -> List[str]:
        """URLs of the successful items, in input order."""
        return [o.url for o in self.outcomes if o.success]

    @property
    def succeeded(self) -> int:
        return sum(1 for o in self.outcomes if o.success)

    @property
    def failed(self) -> int:
        return sum(1 for o in self.outcomes if not o.success)
