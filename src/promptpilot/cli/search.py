"""ppl search command - one-shot name search."""

import asyncio
import json
from pathlib import Path

import click

from promptpilot.cli.utils import resolve_config
from promptpilot.engine import build_engine
from promptpilot.fs.store import EntryKind
from promptpilot.search.engine import SearchHit


async def run_search(root: Path, query: str) -> list[SearchHit]:
    """Run ``query`` over ``root`` to completion, in traversal order."""
    engine = build_engine(root, resolve_config(root, watch=False))
    return [hit async for hit in engine.search.search(query)]


@click.command()
@click.argument("root", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.argument("query")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def search_command(root: Path, query: str, as_json: bool) -> None:
    """Find entries under ROOT whose name contains QUERY (case-insensitive)."""
    if not query:
        raise click.BadParameter("query must not be empty", param_hint="QUERY")

    hits = asyncio.run(run_search(root.resolve(), query))

    if as_json:
        click.echo(
            json.dumps([{"relative_path": h.relative_path, "kind": h.kind.value} for h in hits])
        )
        return
    for hit in hits:
        suffix = "/" if hit.kind is EntryKind.DIRECTORY else ""
        click.echo(f"{hit.relative_path}{suffix}")
