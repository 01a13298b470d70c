"""Core module exports."""

from promptpilot.core.debounce import Debounced, debounce
from promptpilot.core.errors import (
    ConfigError,
    ErrorCode,
    PromptPilotError,
    SelectionError,
)
from promptpilot.core.events import EventChannel, Subscription
from promptpilot.core.logging import configure_logging, get_logger

__all__ = [
    # Errors
    "ConfigError",
    "ErrorCode",
    "PromptPilotError",
    "SelectionError",
    # Events
    "Debounced",
    "EventChannel",
    "Subscription",
    "debounce",
    # Logging
    "configure_logging",
    "get_logger",
]
