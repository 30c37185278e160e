"""``gamefinder scan [ROOTS]...``: Scan directories for installed games.

Without ROOTS the platform default search roots are used. Signatures come
from ``--signatures``; without one every detection is heuristic.

Exit Codes:
    0: Scan completed or was cancelled by ``--timeout`` (even with
        per-directory errors recorded).
    1: The signatures file could not be loaded.
    2: No usable search roots exist.
"""

from __future__ import annotations

import json
import logging
import sys
import threading

import click

from gamefinder.cli.output import print_scan_result, result_to_dict
from gamefinder.core.coordinator import DetectionCoordinator
from gamefinder.core.models import ScanProgress, ScanStatus
from gamefinder.exceptions import SignatureFileError
from gamefinder.signatures.loader import SignatureCatalog, load_signature_file
from gamefinder.sources import StaticLibrarySource

logger = logging.getLogger(__name__)


def load_catalog(path: str | None) -> SignatureCatalog:
    """Load ``--signatures`` or exit with code 1.

    Args:
        path: Signature file path, or None for an empty catalog.

    Returns:
        The loaded catalog.
    """
    if path is None:
        return SignatureCatalog()
    try:
        return load_signature_file(path)
    except SignatureFileError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)


def _log_progress(event: ScanProgress) -> None:
    logger.debug(
        "%s [%d/%d, %d games]",
        event.status, event.files_scanned, event.total_files, event.games_found,
    )


@click.command("scan")
@click.argument("roots", nargs=-1)
@click.option(
    "--recursive/--no-recursive",
    default=True,
    help="Descend into subdirectories (default: recursive).",
)
@click.option(
    "--timeout",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Cancel the scan after this many seconds, keeping partial results.",
)
@click.option(
    "--signatures", "signatures_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="JSON or YAML signature file.",
)
@click.option(
    "--known",
    multiple=True,
    help="Path already in the game library (repeatable).",
)
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format: text (default) or json.",
)
def scan_command(
    roots: tuple[str, ...],
    recursive: bool,
    timeout: float | None,
    signatures_path: str | None,
    known: tuple[str, ...],
    output_format: str,
) -> None:
    """Scan ROOTS for installed games.

    Examples:

        gamefinder scan "D:/Games" --signatures signatures.yaml

        gamefinder scan --no-recursive --timeout 30 --format json
    """
    catalog = load_catalog(signatures_path)
    coordinator = DetectionCoordinator(
        catalog,
        library_source=StaticLibrarySource(games=known),
    )

    cancel = threading.Event()
    timer = threading.Timer(timeout, cancel.set) if timeout else None
    if timer is not None:
        timer.daemon = True
        timer.start()
    try:
        result = coordinator.scan(
            roots or None, recursive=recursive, cancel=cancel, progress=_log_progress,
        )
    finally:
        if timer is not None:
            timer.cancel()

    if output_format == "json":
        click.echo(json.dumps(result_to_dict(result), indent=2))
    else:
        print_scan_result(result)

    if result.status is ScanStatus.FAILED and not result.scanned_paths:
        sys.exit(2)
    sys.exit(0)

