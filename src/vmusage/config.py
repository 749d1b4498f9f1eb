"""Importer configuration and input schemas."""

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from vmusage.core.models import IdentityLabel
from vmusage.errors import (
    ConfigValidationError,
    InputValidationError,
    build_error_message,
)

# Compute Engine metrics are collected every minute
SAMPLING_PERIOD_SECONDS = 60
DEFAULT_VENDOR = "gcp"

_COMPONENT = "UsageImporter"


class ImporterConfig(BaseModel):
    """Per-deployment importer configuration.

    Unknown keys are kept and passed through to every output record.
    """

    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)

    gcp_project_id: str = Field(alias="gcp-project-id", min_length=1)
    identity: IdentityLabel = Field(
        default=IdentityLabel.INSTANCE_ID, alias="instance-identity"
    )
    vendor: str = DEFAULT_VENDOR

    def context_fields(self) -> dict[str, Any]:
        """Fields merged into every output record."""
        return self.model_dump(mode="json", by_alias=True, exclude={"vendor"})


class ImporterInput(BaseModel):
    """One observation window requested by the caller.

    Unknown keys are kept and passed through to the output records.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    timestamp: datetime
    duration: float = Field(gt=0)

    @field_validator("timestamp")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value

    @property
    def start_time(self) -> int:
        """Window start in seconds since epoch."""
        return int(self.timestamp.timestamp())

    @property
    def end_time(self) -> int:
        """Window end in seconds since epoch."""
        return self.start_time + int(self.duration)

    def passthrough_fields(self) -> dict[str, Any]:
        """Fields copied to the output records.

        The window timestamp is left out so each record keeps the timestamp
        of its own sample.
        """
        return self.model_dump(mode="json", exclude={"timestamp"})


def load_config(config: Mapping[str, Any] | None) -> ImporterConfig:
    """Validate raw importer configuration.

    Raises:
        ConfigValidationError: If config is missing or invalid.
    """
    if config is None:
        raise ConfigValidationError(
            build_error_message(_COMPONENT, "Config must be provided.")
        )
    try:
        return ImporterConfig.model_validate(dict(config))
    except ValidationError as exc:
        raise ConfigValidationError(build_error_message(_COMPONENT, str(exc))) from exc


def load_input(raw: Mapping[str, Any]) -> ImporterInput:
    """Validate one raw importer input.

    Raises:
        InputValidationError: If required fields are missing or invalid.
    """
    try:
        return ImporterInput.model_validate(dict(raw))
    except ValidationError as exc:
        raise InputValidationError(build_error_message(_COMPONENT, str(exc))) from exc
