"""Command line interface for ttyline."""

import logging
import pathlib

import click

from . import script, tracelog
from .datatypes import Default, EditOp, OutputFormat

logger = logging.getLogger(__name__)


SCRIPT_OPS_EPILOG = "Edit script ops: " + ", ".join(op.value for op in EditOp)

_FORMAT_CHOICE = click.Choice([f.value for f in OutputFormat], case_sensitive=False)


@click.group(invoke_without_command=True)
@click.help_option()
@click.option("-q", "--quiet", is_flag=True, default=False, help="Show only error messages.")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Enable verbose messages.")
@click.version_option()
@click.pass_context
def cli(ctx: click.Context, quiet: bool, verbose: bool) -> None:
    """Inspect and replay edits on a terminal input line."""
    log_level = get_logging_level(quiet, verbose)
    tracelog.initialize(log_level)
    logger.debug(f"quiet: '{quiet}' verbose: '{verbose}'")

    if not ctx.invoked_subcommand:
        click.echo(ctx.get_help())


@cli.command(short_help="Show a line and its cursor and widths.")
@click.option("-p", "--prompt", default=Default.Prompt, show_default=True, help="Prompt to show in front of TEXT.")
@click.option("-c", "--cursor", type=int, default=None, metavar="N", help="Move the cursor to N, clamped to the line.")
@click.option("-f", "--format", "output_format", type=_FORMAT_CHOICE, default=Default.Format.value, show_default=True, help="Summary format.")
@click.argument("text", default="")
@click.help_option()
def show(prompt: str, cursor: int | None, output_format: str, text: str) -> None:
    """Show the line made from PROMPT and TEXT with its cursor and terminal widths."""
    script.handle_show(prompt, text, cursor, OutputFormat(output_format.lower()))


@cli.command(
    epilog=SCRIPT_OPS_EPILOG,
    short_help="Replay the edit steps in a TOML script.",
)
@click.option("-f", "--format", "output_format", type=_FORMAT_CHOICE, default=Default.Format.value, show_default=True, help="Summary format.")
@click.argument(
    "script_path",
    metavar="SCRIPT",
    type=click.Path(exists=True, dir_okay=False, readable=True, resolve_path=True, path_type=pathlib.Path),
)
@click.help_option()
def replay(output_format: str, script_path: pathlib.Path) -> None:
    """Replay the edit steps in SCRIPT and show the final line."""
    script.handle_replay(script_path, OutputFormat(output_format.lower()))


def get_logging_level(quiet: bool, verbose: bool) -> int:
    """Get the logging level for the specified quiet and verbose options."""
    log_level = logging.INFO
    if verbose:
        log_level = logging.DEBUG
    if quiet:
        log_level = logging.ERROR
    return log_level
