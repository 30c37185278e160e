"""``gamefinder signatures``: Validate and download signature files.

Usage::

    gamefinder signatures validate signatures.yaml
    gamefinder signatures fetch https://example.org/signatures.json -o signatures.json
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import click

from gamefinder.cli.output import console, print_validation_results
from gamefinder.exceptions import SignatureFetchError, SignatureFileError
from gamefinder.signatures.loader import load_signature_file, load_signature_text
from gamefinder.signatures.remote import fetch_signatures
from gamefinder.signatures.validation import validate_signature


@click.group("signatures")
def signatures_group() -> None:
    """Work with signature files."""


@signatures_group.command("validate")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
def validate_command(file: str) -> None:
    """Check every game signature in FILE.

    Exit code 0 when all signatures are valid (warnings allowed), 1
    otherwise.
    """
    try:
        catalog = load_signature_file(file)
    except SignatureFileError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    if not catalog.games:
        click.echo("No signatures found.")
        sys.exit(1)

    rows = [(sig.name, validate_signature(sig)) for sig in catalog.games]
    print_validation_results(rows)
    sys.exit(0 if all(result.is_valid for _, result in rows) else 1)


@signatures_group.command("fetch")
@click.argument("url")
@click.option(
    "--output", "-o", "output_path",
    type=click.Path(dir_okay=False, writable=True),
    default=None,
    help="Write the file here instead of printing it.",
)
def fetch_command(url: str, output_path: str | None) -> None:
    """Download a signature file from URL.

    GitHub contents-API URLs are unwrapped automatically. The download is
    parsed before it is written, so a broken file never replaces a good
    one.
    """
    try:
        text = asyncio.run(fetch_signatures(url))
        catalog = load_signature_text(text, url)
    except (SignatureFetchError, SignatureFileError) as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    if output_path is None:
        click.echo(text)
    else:
        Path(output_path).write_text(text, encoding="utf-8")
        console.print(f"Saved {len(catalog)} signatures to {output_path}")
    sys.exit(0)
