"""gamefinder CLI: Find installed games and their companion tools.

Entry point for the ``gamefinder`` command-line tool. Registers all
subcommands under a single Click group.

Commands:
    scan        Scan directories for installed games.
    identify    Identify a single executable.
    signatures  Validate or download signature files.

Usage::

    gamefinder scan                                 # Platform default roots
    gamefinder scan "D:/Games" --signatures sigs.yaml
    gamefinder identify "D:/Games/Hades/Hades.exe"
    gamefinder signatures validate sigs.yaml
    gamefinder signatures fetch https://example.org/sigs.json -o sigs.json
"""

from __future__ import annotations

import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from gamefinder import __version__
from gamefinder.cli.identify import identify_command
from gamefinder.cli.scan import scan_command
from gamefinder.cli.signatures_cmd import signatures_group


def setup_logging(verbose: bool = False) -> logging.Logger:
    """Route package logs to stderr through Rich.

    Args:
        verbose: Log at DEBUG instead of WARNING.

    Returns:
        The package logger.
    """
    logger = logging.getLogger("gamefinder")
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.handlers.clear()
    handler = RichHandler(console=Console(stderr=True), show_path=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    return logger


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging.")
def cli(verbose: bool) -> None:
    """gamefinder: detect installed games with signatures and heuristics.

    Scan folders for game executables, match them against a signature
    catalog, fall back to metadata heuristics, and find companion tools
    installed alongside.
    """
    setup_logging(verbose)


# Register all subcommands
cli.add_command(scan_command)
cli.add_command(identify_command)
cli.add_command(signatures_group)
