"""Config module exports."""

from promptpilot.config.loader import load_config
from promptpilot.config.models import (
    LoggingConfig,
    LogOutputConfig,
    PromptPilotConfig,
    SearchConfig,
    TreeConfig,
    WatcherConfig,
)

__all__ = [
    "load_config",
    "LoggingConfig",
    "LogOutputConfig",
    "PromptPilotConfig",
    "SearchConfig",
    "TreeConfig",
    "WatcherConfig",
]
