"""``gamefinder identify FILE``: Identify a single executable.

Runs the same signature-then-heuristic pipeline as ``scan`` on one file,
including companion discovery next to signature matches.

Exit Codes:
    0: The file was identified as a game.
    1: The file is not a candidate, matched nothing, or the signatures
        file could not be loaded.
"""

from __future__ import annotations

import json
import sys

import click

from gamefinder.cli.output import game_to_dict, print_game_detail
from gamefinder.cli.scan import load_catalog
from gamefinder.core.coordinator import DetectionCoordinator


@click.command("identify")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--signatures", "signatures_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="JSON or YAML signature file.",
)
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format: text (default) or json.",
)
def identify_command(file: str, signatures_path: str | None, output_format: str) -> None:
    """Identify FILE as a known or likely game."""
    coordinator = DetectionCoordinator(load_catalog(signatures_path))
    game = coordinator.identify_one(file)

    if game is None:
        if output_format == "json":
            click.echo(json.dumps({"game": None}))
        else:
            click.echo(f"Not identified as a game: {file}")
        sys.exit(1)

    if output_format == "json":
        click.echo(json.dumps({"game": game_to_dict(game)}, indent=2))
    else:
        print_game_detail(game)
    sys.exit(0)
