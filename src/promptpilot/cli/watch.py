"""ppl watch command - keep the engine running and report tree refreshes."""

import asyncio
from pathlib import Path

import click

from promptpilot.cli.utils import resolve_config
from promptpilot.core.logging import configure_logging
from promptpilot.engine import PromptPilotEngine, build_engine


async def _watch(engine: PromptPilotEngine, query: str | None) -> None:
    refreshes: asyncio.Queue[None] = asyncio.Queue()
    engine.tree.tree_data_changed.subscribe(refreshes.put_nowait)

    async with engine:
        if query:
            engine.tree.set_search_query(query)
        while True:
            await refreshes.get()
            children = await engine.tree.get_children()
            mode = f"search {engine.search.query!r}" if engine.search.active else "browse"
            click.echo(f"refresh ({mode}): {len(children)} root entries")


@click.command()
@click.argument("root", default=".", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--query", default=None, help="Start with this name search active")
@click.pass_context
def watch_command(ctx: click.Context, root: Path, query: str | None) -> None:
    """Watch ROOT and print a line for every delivered tree refresh.

    Logging follows the ``logging`` section of the config unless -v is given.
    Press Ctrl+C to stop.
    """
    root = root.resolve()
    config = resolve_config(root, watch=True)
    if not (ctx.obj or {}).get("verbose"):
        configure_logging(config=config.logging)

    engine = build_engine(root, config)
    click.echo(f"Watching {engine.root}")
    try:
        asyncio.run(_watch(engine, query))
    except KeyboardInterrupt:
        click.echo("Stopped")
