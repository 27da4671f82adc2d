"""
Frame Dedup Configuration
=========================

This module handles configuration for duplicate frame removal.

Configuration Sources (in order of precedence):
    1. Environment variables (highest priority)
    2. YAML settings file
    3. Default values (lowest priority)

Environment Variable Mapping:
    FRAME_DEDUP_ENABLE       -> dedup.enabled
    FRAME_DEDUP_THRESHOLD    -> dedup.similarity_threshold
    FRAME_DEDUP_SAMPLE_X     -> dedup.sample_step_x
    FRAME_DEDUP_SAMPLE_Y     -> dedup.sample_step_y
    FRAME_DEDUP_TOLERANCE    -> dedup.per_channel_tolerance
    FRAME_DEDUP_CHANNEL_MASK -> dedup.channel_mask
    FRAME_DEDUP_KEEP         -> dedup.keep_policy
    FRAME_DEDUP_DELAY_MERGE  -> dedup.delay_merge
    FRAME_DEDUP_EARLY_OUT    -> dedup.enable_early_out
    FRAME_DEDUP_LOG_LEVEL    -> logging.level

Clamping:
    Out-of-range numeric values are clamped into their documented range
    rather than rejected, so a hand-edited settings file never prevents
    a capture from being written. Values that cannot be interpreted at
    all still raise pydantic.ValidationError.

Example:
    from frame_dedup.config import load_config

    settings = load_config("frame_dedup.yaml")
    result = remove_duplicates(frames, settings.dedup)
"""

import os
import logging
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from frame_dedup.models.pixel import CHANNELS, RGB_MASK
from frame_dedup.models.policy import DelayMergePolicy, KeepPolicy


logger = logging.getLogger(__name__)

MAX_TOLERANCE = 255

# Numeric codes accepted for the policy enums (persisted by older settings files)
_KEEP_CODES = {0: KeepPolicy.FIRST, 1: KeepPolicy.LAST}
_DELAY_CODES = {
    0: DelayMergePolicy.KEEP,
    1: DelayMergePolicy.AVERAGE,
    2: DelayMergePolicy.SUM,
}


def _as_int(value: Any) -> Any:
    """Coerce to int if possible, otherwise hand the raw value to pydantic."""
    if isinstance(value, bool):
        return int(value)
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        pass
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return value


# =============================================================================
# Configuration Models
# =============================================================================

class DedupConfig(BaseModel):
    """
    Comparison and removal configuration.

    Passed explicitly to every similarity, detection and grouping call;
    nothing in the package reads process-wide settings.
    """

    model_config = ConfigDict(validate_assignment=True)

    enabled: bool = Field(
        default=False,
        description="Whether callers should run duplicate removal at all",
    )
    similarity_threshold: float = Field(
        default=0.90,
        ge=0.0,
        le=1.0,
        description="Frames with similarity >= threshold are duplicates",
    )
    sample_step_x: int = Field(
        default=1,
        ge=1,
        description="Horizontal sampling stride (1 = every pixel)",
    )
    sample_step_y: int = Field(
        default=1,
        ge=1,
        description="Vertical sampling stride (1 = every row)",
    )
    per_channel_tolerance: int = Field(
        default=0,
        ge=0,
        le=MAX_TOLERANCE,
        description="Max absolute difference per channel (0 = exact match)",
    )
    channel_mask: int = Field(
        default=RGB_MASK,
        ge=0,
        le=0xFFFFFFFF,
        description="Packed mask of channels taking part in comparison",
    )
    keep_policy: KeepPolicy = Field(
        default=KeepPolicy.FIRST,
        description="Which frame of a duplicate run survives",
    )
    delay_merge: DelayMergePolicy = Field(
        default=DelayMergePolicy.SUM,
        description="How the surviving frame's delay is derived",
    )
    enable_early_out: bool = Field(
        default=True,
        description="Stop scanning once the threshold is unreachable",
    )

    @field_validator("similarity_threshold", mode="before")
    @classmethod
    def clamp_threshold(cls, v: Any) -> Any:
        """Clamp the threshold into [0, 1]."""
        try:
            value = float(v)
        except (TypeError, ValueError):
            return v
        return min(max(value, 0.0), 1.0)

    @field_validator("sample_step_x", "sample_step_y", mode="before")
    @classmethod
    def clamp_step(cls, v: Any) -> Any:
        """Treat strides below 1 as 1."""
        value = _as_int(v)
        if isinstance(value, int) and value < 1:
            return 1
        return value

    @field_validator("per_channel_tolerance", mode="before")
    @classmethod
    def clamp_tolerance(cls, v: Any) -> Any:
        """Clamp tolerance into [0, 255]."""
        value = _as_int(v)
        if isinstance(value, int):
            return min(max(value, 0), MAX_TOLERANCE)
        return value

    @field_validator("channel_mask", mode="before")
    @classmethod
    def parse_channel_mask(cls, v: Any) -> Any:
        """Accept a packed integer mask or a list of channel names."""
        if isinstance(v, (list, tuple, set)):
            names = {str(name).strip().lower() for name in v}
            known = {name for name, _, _ in CHANNELS}
            unknown = names - known
            if unknown:
                raise ValueError(f"unknown channel(s): {sorted(unknown)}")
            mask = 0
            for name, bits, _ in CHANNELS:
                if name in names:
                    mask |= bits
            return mask
        value = _as_int(v)
        if isinstance(value, int):
            return value & 0xFFFFFFFF
        return value

    @field_validator("keep_policy", mode="before")
    @classmethod
    def parse_keep_policy(cls, v: Any) -> Any:
        """Accept 0/1 codes (nonzero = keep last) as well as names."""
        if isinstance(v, str):
            v = v.strip().lower()
            if not v.lstrip("-").isdigit():
                return v
        value = _as_int(v)
        if isinstance(value, int):
            return KeepPolicy.LAST if value else KeepPolicy.FIRST
        return v

    @field_validator("delay_merge", mode="before")
    @classmethod
    def parse_delay_merge(cls, v: Any) -> Any:
        """Accept 0/1/2 codes (keep/average/sum) as well as names."""
        if isinstance(v, str):
            v = v.strip().lower()
            if not v.isdigit():
                return v
        value = _as_int(v)
        if isinstance(value, int) and value in _DELAY_CODES:
            return _DELAY_CODES[value]
        return v

    @field_validator("enabled", "enable_early_out", mode="before")
    @classmethod
    def parse_flag(cls, v: Any) -> Any:
        """Any nonzero integer enables a flag."""
        if isinstance(v, int) and not isinstance(v, bool):
            return v != 0
        if isinstance(v, str) and v.strip().lstrip("-").isdigit():
            return int(v) != 0
        return v

    def channels(self) -> list:
        """Names of the channels selected by the mask."""
        return [name for name, bits, _ in CHANNELS if self.channel_mask & bits]


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(default="text", description="Log format: json or text")


class Settings(BaseModel):
    """
    Root settings for frame_dedup.

    Loads configuration from a YAML file and environment variables.
    Environment variables take precedence over file values.
    """

    dedup: DedupConfig = Field(default_factory=DedupConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# =============================================================================
# Configuration Loading
# =============================================================================

def load_config(config_path: Optional[Union[str, Path]] = None) -> Settings:
    """
    Load configuration from YAML file and environment variables.

    Priority (highest to lowest):
        1. Environment variables
        2. YAML config file
        3. Default values

    Args:
        config_path: Path to a YAML file. If None, searches common locations.

    Returns:
        Settings: Loaded and clamped configuration

    Raises:
        pydantic.ValidationError: If a value cannot be interpreted
    """
    if config_path is None:
        for path in (Path("frame_dedup.yaml"), Path("config.yaml")):
            if path.exists():
                config_path = path
                break

    config_data: dict = {}
    if config_path and Path(config_path).exists():
        logger.info(f"Loading config from: {config_path}")
        with open(config_path, "r") as f:
            config_data = yaml.safe_load(f) or {}
    else:
        logger.debug("No config file found, using defaults and environment variables")

    _apply_env_overrides(config_data)

    return Settings.model_validate(config_data)


def _apply_env_overrides(config_data: dict) -> None:
    """Apply environment variable overrides to config data."""
    dedup_keys = {
        "FRAME_DEDUP_ENABLE": "enabled",
        "FRAME_DEDUP_THRESHOLD": "similarity_threshold",
        "FRAME_DEDUP_SAMPLE_X": "sample_step_x",
        "FRAME_DEDUP_SAMPLE_Y": "sample_step_y",
        "FRAME_DEDUP_TOLERANCE": "per_channel_tolerance",
        "FRAME_DEDUP_CHANNEL_MASK": "channel_mask",
        "FRAME_DEDUP_KEEP": "keep_policy",
        "FRAME_DEDUP_DELAY_MERGE": "delay_merge",
        "FRAME_DEDUP_EARLY_OUT": "enable_early_out",
    }
    for env_name, key in dedup_keys.items():
        if (value := os.environ.get(env_name)) is not None:
            config_data.setdefault("dedup", {})[key] = value

    if env_log := os.environ.get("FRAME_DEDUP_LOG_LEVEL"):
        config_data.setdefault("logging", {})["level"] = env_log


def save_config(settings: Settings, config_path: Union[str, Path]) -> None:
    """
    Persist settings as YAML.

    The written file loads back to an equal Settings via load_config
    (absent environment overrides).

    Args:
        settings: Settings to write
        config_path: Destination file
    """
    data = settings.model_dump(mode="json")
    with open(config_path, "w") as f:
        yaml.safe_dump(data, f, sort_keys=False)
    logger.info(f"Saved config to: {config_path}")


def setup_logging(settings: Settings) -> None:
    """Configure logging based on settings."""
    log_level = getattr(logging, settings.logging.level.upper(), logging.INFO)

    if settings.logging.format == "json":
        log_format = '{"time": "%(asctime)s", "level": "%(levelname)s", "module": "%(name)s", "message": "%(message)s"}'
    else:
        log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=log_level,
        format=log_format,
        datefmt="%Y-%m-%dT%H:%M:%S",
    )
