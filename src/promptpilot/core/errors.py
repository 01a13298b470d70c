"""PromptPilot error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Selection / filesystem
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002

    # Selection (3xxx)
    SELECTION_PATH_NOT_FOUND = 3001
    SNAPSHOT_STAT_FAILED = 3002


@dataclass(frozen=True, slots=True)
class PromptPilotError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'CONFIG_PARSE_ERROR')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(PromptPilotError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )


class SelectionError(PromptPilotError):
    """Errors surfaced by selection operations.

    Raised when a toggled path has vanished (the set is left untouched) and
    by strict snapshots when a selected path can no longer be stat'ed.
    """

    @classmethod
    def not_found(cls, path: str) -> "SelectionError":
        return cls(
            code=ErrorCode.SELECTION_PATH_NOT_FOUND,
            message=f"Path not found: {path}",
            details={"path": path},
        )

    @classmethod
    def stat_failed(cls, path: str, reason: str) -> "SelectionError":
        return cls(
            code=ErrorCode.SNAPSHOT_STAT_FAILED,
            message=f"Cannot stat selected path {path}: {reason}",
            details={"path": path, "reason": reason},
        )
