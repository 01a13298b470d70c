"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (PROMPTPILOT__SECTION__KEY)
3. Root YAML (<root>/.promptpilot/config.yaml)
4. Global YAML (~/.config/promptpilot/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    PROMPTPILOT__<SECTION>__<KEY>=<VALUE>

Examples:
    PROMPTPILOT__LOGGING__LEVEL=DEBUG
    PROMPTPILOT__SEARCH__DEBOUNCE_SEC=0.2
    PROMPTPILOT__WATCHER__FORCE_POLLING=true
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        PROMPTPILOT__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG logs every listing and search hit.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class SearchConfig(BaseModel):
    """Incremental name search configuration.

    Env vars:
        PROMPTPILOT__SEARCH__DEBOUNCE_SEC: Window for batching streamed results
    """

    debounce_sec: float = Field(
        default=0.1,
        description="Quiet window before streamed search results are delivered. "
        "Lower values refresh the view more often during large searches.",
    )

    @field_validator("debounce_sec")
    @classmethod
    def validate_debounce(cls, v: float) -> float:
        if v < 0:
            raise ValueError(f"debounce_sec must be >= 0, got {v}")
        return v


class TreeConfig(BaseModel):
    """Tree view configuration.

    Env vars:
        PROMPTPILOT__TREE__REFRESH_DEBOUNCE_SEC: Window for batching watcher refreshes
    """

    refresh_debounce_sec: float = Field(
        default=0.3,
        description="Quiet window before a watcher-triggered full tree refresh. "
        "Lower values may cause refresh storms during bulk file operations.",
    )

    @field_validator("refresh_debounce_sec")
    @classmethod
    def validate_debounce(cls, v: float) -> float:
        if v < 0:
            raise ValueError(f"refresh_debounce_sec must be >= 0, got {v}")
        return v


class WatcherConfig(BaseModel):
    """Filesystem watcher configuration.

    Env vars:
        PROMPTPILOT__WATCHER__ENABLED: Watch the root for changes
        PROMPTPILOT__WATCHER__POLL_INTERVAL_SEC: Poll interval in polling mode
        PROMPTPILOT__WATCHER__FORCE_POLLING: Use polling even on native filesystems
    """

    enabled: bool = Field(
        default=True,
        description="Watch the root and refresh the tree on any change.",
    )
    poll_interval_sec: float = Field(
        default=1.0,
        description="Polling interval for cross-filesystem mounts (WSL /mnt/*). "
        "Lower values increase CPU usage but detect changes faster.",
    )
    force_polling: bool = Field(
        default=False,
        description="Always poll instead of using native notifications.",
    )


class PromptPilotConfig(BaseModel):
    """Root configuration for PromptPilot.

    All settings can be configured via:
    1. Environment variables: PROMPTPILOT__SECTION__KEY
    2. YAML config files (root or global)
    3. Direct kwargs to load_config()
    """

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)
    tree: TreeConfig = Field(default_factory=TreeConfig)
    watcher: WatcherConfig = Field(default_factory=WatcherConfig)
