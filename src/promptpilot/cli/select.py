"""ppl select command - toggle paths and print the resulting selection."""

import asyncio
import json
from pathlib import Path

import click

from promptpilot.cli.utils import resolve_config
from promptpilot.core.errors import SelectionError
from promptpilot.engine import build_engine
from promptpilot.selection.selection_set import SelectedPath


async def run_select(root: Path, paths: list[Path]) -> list[SelectedPath]:
    """Toggle each path in order (directories cascade) and snapshot."""
    engine = build_engine(root, resolve_config(root, watch=False))
    for path in paths:
        await engine.tree.toggle_selection_by_path(str(path))
    return engine.tree.get_selected_files()


@click.command()
@click.argument("root", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.argument("paths", nargs=-1, required=True, type=click.Path(path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def select_command(root: Path, paths: tuple[Path, ...], as_json: bool) -> None:
    """Toggle PATHS under ROOT and print every selected path.

    Relative PATHS are resolved against ROOT. Toggling the same path twice
    deselects it again.
    """
    root = root.resolve()
    targets = [p if p.is_absolute() else root / p for p in paths]

    try:
        selected = asyncio.run(run_select(root, targets))
    except SelectionError as e:
        raise click.ClickException(str(e)) from e

    if as_json:
        click.echo(json.dumps([row.to_dict() for row in selected]))
        return
    for row in selected:
        click.echo(f"{row.path}{'/' if row.is_directory else ''}")
