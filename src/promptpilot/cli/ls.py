"""ppl ls command - render the browsable tree."""

import asyncio
from pathlib import Path

import click
from rich.console import Console
from rich.tree import Tree

from promptpilot.cli.utils import resolve_config
from promptpilot.engine import build_engine
from promptpilot.tree.adapter import TreeItem, TreeViewAdapter


def _label(item: TreeItem) -> str:
    return f"[bold blue]{item.label}/[/bold blue]" if item.is_directory else item.label


async def _fill(tree: TreeViewAdapter, node: Tree, item: TreeItem | None, depth: int) -> None:
    for child in await tree.get_children(item):
        branch = node.add(_label(child))
        if child.is_directory and depth > 1:
            await _fill(tree, branch, child, depth - 1)


async def build_tree(root: Path, depth: int) -> Tree:
    """Build a rich Tree for ``root`` from Entry Lister order."""
    engine = build_engine(root, resolve_config(root, watch=False))
    rendered = Tree(f"[bold]{engine.root}[/bold]")
    await _fill(engine.tree, rendered, None, depth)
    return rendered


@click.command()
@click.argument("root", default=".", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--depth", default=2, show_default=True, type=click.IntRange(min=1), help="Levels to expand")
def ls_command(root: Path, depth: int) -> None:
    """Show the tree under ROOT (default: current directory).

    Hidden entries are omitted; directories come before files.
    """
    Console().print(asyncio.run(build_tree(root.resolve(), depth)))
