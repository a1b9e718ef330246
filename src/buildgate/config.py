"""Configuration management for buildgate using Pydantic models."""

import json
import logging
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".buildgate.json"


class MessagePlacement(str, Enum):
    """Screen anchors for transient messages."""
    UPPER_CENTER = "upper_center"
    UPPER_LEFT = "upper_left"
    UPPER_RIGHT = "upper_right"
    LOWER_CENTER = "lower_center"


class LogLevel(str, Enum):
    """Logging levels."""
    ERROR = "error"
    WARN = "warn"
    INFO = "info"
    DEBUG = "debug"


class ValidationConfig(BaseModel):
    """Toggles for the individual admission checks."""
    check_facility_requirements: bool = Field(alias="checkFacilityRequirements", default=True)
    check_part_availability: bool = Field(alias="checkPartAvailability", default=True)
    check_available_funds: bool = Field(alias="checkAvailableFunds", default=True)

    model_config = ConfigDict(populate_by_name=True)


class MessageConfig(BaseModel):
    """Transient message presentation section."""
    transient_duration: float = Field(alias="transientDuration", default=4.0)
    unlock_failure_duration: float = Field(alias="unlockFailureDuration", default=5.0)
    placement: MessagePlacement = MessagePlacement.UPPER_CENTER

    @field_validator("transient_duration", "unlock_failure_duration")
    @classmethod
    def validate_duration(cls, v):
        if v <= 0:
            raise ValueError("message durations must be > 0 seconds")
        return v

    model_config = ConfigDict(populate_by_name=True)


class LoggingConfig(BaseModel):
    """Logging configuration section."""
    level: LogLevel = LogLevel.INFO

    model_config = ConfigDict(use_enum_values=True)


class BuildgateConfig(BaseModel):
    """Complete buildgate configuration model."""
    validation: ValidationConfig = Field(default_factory=ValidationConfig)
    messages: MessageConfig = Field(default_factory=MessageConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = ConfigDict(extra="forbid")


def load_config(config_path: str | Path | None = None) -> BuildgateConfig:
    """Load a `BuildgateConfig`.

    An explicit `config_path` is read if it exists. Without one, the nearest
    `CONFIG_FILE_NAME` (.buildgate.json) found by `find_config_file` is used.
    When neither yields a file, the defaults apply: every check enabled,
    4 s transient messages and 5 s unlock failure messages.

    Raises:
        ValueError: The file is not JSON or does not describe a valid config.
            The message names the offending file.
    """
    path = find_config_file() if config_path is None else Path(config_path)
    if path is None or not path.exists():
        logger.debug("No config file found, using defaults")
        return BuildgateConfig()

    try:
        config_data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in config file {path}: {e}") from e

    try:
        config = BuildgateConfig.model_validate(config_data)
    except ValidationError as e:
        raise ValueError(f"Failed to load config from {path}: {e}") from e

    logger.debug(f"Loaded config from {path}")
    return config


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Return the `CONFIG_FILE_NAME` closest to `start_dir`, or None.

    `start_dir` (default: the working directory) is checked first, then each
    of its parents up to the filesystem root.
    """
    start = Path(start_dir or Path.cwd()).resolve()
    for directory in (start, *start.parents):
        candidate = directory / CONFIG_FILE_NAME
        if candidate.is_file():
            return candidate
    return None
