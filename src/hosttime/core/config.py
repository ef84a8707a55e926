# src/hosttime/core/config.py
"""
Configuration schema and loading for hosttime.

Uses Pydantic for validation and Dynaconf for multi-source loading.
Settings are frozen (immutable) after construction.
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

from hosttime.contracts.enums import MissedTickBehavior
from hosttime.core.clock import HOST_MAX_DELAY_MS


class TimerSettings(BaseModel):
    """Timer primitive defaults.

    Example YAML:
        timer:
          default_missed_tick_behavior: skip
          max_host_delay_ms: 86400000
    """

    model_config = {"frozen": True}

    default_missed_tick_behavior: MissedTickBehavior = Field(
        default=MissedTickBehavior.BURST,
        description="Catch-up policy for intervals created without an explicit one",
    )
    max_host_delay_ms: int = Field(
        default=HOST_MAX_DELAY_MS,
        gt=0,
        le=HOST_MAX_DELAY_MS,
        description="Largest single delay handed to the host timer service",
    )


class LoggingSettings(BaseModel):
    """Logging output configuration.

    Example YAML:
        logging:
          level: DEBUG
          json_output: true
          timer_events: true
    """

    model_config = {"frozen": True}

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO", description="Root log level")
    json_output: bool = Field(default=False, description="Emit JSON lines instead of console output")
    timer_events: bool = Field(default=False, description="Emit per-registration timer events at DEBUG")


class HosttimeSettings(BaseModel):
    """Top-level hosttime configuration."""

    model_config = {"frozen": True}

    timer: TimerSettings = Field(default_factory=TimerSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


def load_settings(config_path: Path) -> HosttimeSettings:
    """Load settings from YAML file with environment variable overrides.

    Uses Dynaconf for multi-source loading with precedence:
    1. Environment variables (HOSTTIME_*) - highest priority
    2. Config file
    3. Defaults from Pydantic schema - lowest priority

    Environment variable format: HOSTTIME_TIMER__MAX_HOST_DELAY_MS for nested keys.

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Validated HosttimeSettings instance

    Raises:
        ValidationError: If configuration fails Pydantic validation
        FileNotFoundError: If config file doesn't exist
    """
    from dynaconf import Dynaconf

    # Dynaconf silently accepts missing files
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    dynaconf_settings = Dynaconf(
        envvar_prefix="HOSTTIME",
        settings_files=[str(config_path)],
        environments=False,
        load_dotenv=False,
        merge_enabled=True,
    )

    # Dynaconf returns uppercase keys; nested dicts keep their original case
    internal_keys = {"LOAD_DOTENV", "ENVIRONMENTS", "SETTINGS_FILES"}
    raw_config = {k.lower(): _lower_keys(v) for k, v in dynaconf_settings.as_dict().items() if k not in internal_keys}

    return HosttimeSettings(**raw_config)


def _lower_keys(value: object) -> object:
    if isinstance(value, dict):
        return {str(k).lower(): _lower_keys(v) for k, v in value.items()}
    return value
