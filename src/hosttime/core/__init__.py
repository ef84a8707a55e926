"""Core infrastructure: Clock, Configuration, Logging."""

from hosttime.core.clock import DEFAULT_CLOCK, HOST_MAX_DELAY_MS, AsyncioTimerHost, Clock, TimerHost
from hosttime.core.config import HosttimeSettings, LoggingSettings, TimerSettings, load_settings
from hosttime.core.logging import configure_logging, get_logger

__all__ = [
    "DEFAULT_CLOCK",
    "HOST_MAX_DELAY_MS",
    "AsyncioTimerHost",
    "Clock",
    "HosttimeSettings",
    "LoggingSettings",
    "TimerHost",
    "TimerSettings",
    "configure_logging",
    "get_logger",
    "load_settings",
]
