"""CLI utilities."""

from pathlib import Path

import click

from promptpilot.config.loader import load_config
from promptpilot.config.models import PromptPilotConfig
from promptpilot.core.errors import ConfigError


def resolve_config(root: Path, *, watch: bool) -> PromptPilotConfig:
    """Load config for ``root``; one-shot commands never start a watcher.

    Raises:
        click.ClickException: If the config files are invalid
    """
    try:
        config = load_config(root)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e
    if not watch:
        config.watcher.enabled = False
    return config
