"""CLI handling for pmultiselect.

This module provides the command-line interface for pmultiselect, handling
argument parsing via click, logging configuration, and starting the
selection chooser with the requested behaviour.

Usage:
    pmultiselect [OPTIONS] STRING...
    pmultiselect --stdin [OPTIONS] < strings.txt
    pmultiselect --daemon [OPTIONS]
"""

import sys

import click

from pmultiselect.main_logging import configure_logging
from pmultiselect.main_options import (
    MutuallyExclusiveOption, validate_keysyms, validate_separator,
)


@click.command()
@click.argument("strings", nargs=-1)
@click.option(
    "-d",
    "--daemon",
    is_flag=True,
    cls=MutuallyExclusiveOption,
    not_required_if=["stdin"],
    help="Run as a long-lived daemon collecting selections",
)
@click.option(
    "--stdin",
    is_flag=True,
    cls=MutuallyExclusiveOption,
    not_required_if=["daemon"],
    help="Read the strings from standard input, one per line",
)
@click.option(
    "-t",
    "--separator",
    callback=validate_separator,
    help="Send only the part of a string after this character",
)
@click.option(
    "--open-key",
    "open_keys",
    multiple=True,
    callback=validate_keysyms,
    help="Keysym (e.g. F9) that opens the chooser; repeatable",
)
@click.option(
    "--delivery",
    type=click.Choice(["direct", "relay"]),
    default="direct",
    show_default=True,
    help="Answer requests directly, or relay the paste with a middle click",
)
@click.option(
    "--delegate",
    type=click.Path(exists=True, dir_okay=False),
    help="Program deciding whether a window may receive a relayed paste",
)
@click.option(
    "--arrow-select",
    is_flag=True,
    help="Choose the string as soon as Up or Down is pressed",
)
@click.option(
    "--capture-on-clear",
    is_flag=True,
    help="In daemon mode, add the new selection whenever another program takes it",
)
@click.option(
    "--reassert",
    is_flag=True,
    help="Take the selection back after every capture",
)
@click.option(
    "-v",
    "--verbose",
    is_flag=True,
    help="Enable DEBUG-level logging",
)
def main(
    strings: tuple[str, ...],
    daemon: bool,
    stdin: bool,
    separator: str | None,
    open_keys: tuple[str, ...],
    delivery: str,
    delegate: str | None,
    arrow_select: bool,
    capture_on_clear: bool,
    reassert: bool,
    verbose: bool,
) -> None:
    """Offer several strings as the X11 PRIMARY selection."""
    if daemon and strings:
        raise click.UsageError("Daemon mode takes no strings from the command line")
    if stdin and strings:
        raise click.UsageError("--stdin takes no strings from the command line")
    if capture_on_clear and not daemon:
        raise click.UsageError("--capture-on-clear requires --daemon")

    configure_logging(verbose)

    from pmultiselect.instance import print_startup_message
    from pmultiselect.seed import read_seed_strings
    from pmultiselect.state import Options

    seeds = read_seed_strings(strings, sys.stdin if stdin else None)
    options = Options(
        daemon=daemon,
        separator=separator,
        open_keys=open_keys,
        delivery=delivery,
        delegate=delegate,
        arrow_select=arrow_select,
        capture_on_clear=capture_on_clear,
        reassert=reassert,
    )
    print_startup_message(seeds)
    _run(options, seeds)


def _run(options, seeds: list[str]) -> None:
    """Run pmultiselect, reporting fatal errors.

    Args:
        options: Command line behaviour.
        seeds: The initial candidates.
    """
    import asyncio
    from pmultiselect.app import run_multiselect
    from pmultiselect.errors import MultiselectError

    try:
        asyncio.run(run_multiselect(options, seeds))
    except MultiselectError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
