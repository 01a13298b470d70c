"""PromptPilot CLI - ppl command."""

import click

from promptpilot.cli.ls import ls_command
from promptpilot.cli.search import search_command
from promptpilot.cli.select import select_command
from promptpilot.cli.watch import watch_command
from promptpilot.core.logging import configure_logging


@click.group()
@click.version_option(version="0.1.0", prog_name="ppl")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """PromptPilot - pick files from a directory tree for prompt composition."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    configure_logging(level="DEBUG" if verbose else "WARNING")


cli.add_command(ls_command, name="ls")
cli.add_command(search_command, name="search")
cli.add_command(select_command, name="select")
cli.add_command(watch_command, name="watch")


if __name__ == "__main__":
    cli()
