"""Rich output formatting helpers for the gamefinder CLI.

Provides terminal tables for scan results, single detections and
signature validation, plus the JSON-serialisable views used by
``--format json``.

Confidence Color Mapping:
    >= 0.8 = bold green, >= 0.5 = cyan, below = yellow
"""

from __future__ import annotations

from typing import Any, Sequence

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from gamefinder.core.models import DetectedCompanion, DetectedGame, ScanResult, ScanStatus
from gamefinder.signatures.validation import ValidationLevel, ValidationResult

_STATUS_STYLES: dict[ScanStatus, str] = {
    ScanStatus.COMPLETED: "bold green",
    ScanStatus.CANCELLED: "yellow",
    ScanStatus.FAILED: "bold red",
}

_LEVEL_STYLES: dict[ValidationLevel, str] = {
    ValidationLevel.SUCCESS: "bold green",
    ValidationLevel.WARNING: "yellow",
    ValidationLevel.ERROR: "bold red",
}

console = Console()


def confidence_style(score: float) -> str:
    """Return the Rich style string for a confidence score."""
    if score >= 0.8:
        return "bold green"
    if score >= 0.5:
        return "cyan"
    return "yellow"


# ---------------------------------------------------------------------------
# JSON views
# ---------------------------------------------------------------------------


def companion_to_dict(companion: DetectedCompanion) -> dict[str, Any]:
    sig = companion.matched_signature
    return {
        "name": companion.name,
        "executable_path": companion.executable_path,
        "description": companion.description,
        "publisher": companion.publisher,
        "version": companion.version,
        "companion_args": companion.companion_args,
        "type": companion.type,
        "matched_signature_id": sig.id if sig else None,
        "confidence_score": companion.confidence_score,
        "detection_reasons": list(companion.detection_reasons),
        "already_exists": companion.already_exists,
    }


def game_to_dict(game: DetectedGame) -> dict[str, Any]:
    """Convert a detection to a JSON-serialisable dict."""
    sig = game.matched_signature
    return {
        "name": game.name,
        "short_name": game.short_name,
        "description": game.description,
        "publisher": game.publisher,
        "version": game.version,
        "install_path": game.install_path,
        "game_working_path": game.game_working_path,
        "executable_name": game.executable_name,
        "game_args": game.game_args,
        "game_image": game.game_image,
        "theme_name": game.theme_name,
        "matched_signature_id": sig.id if sig else None,
        "confidence_score": game.confidence_score,
        "detection_reasons": list(game.detection_reasons),
        "already_exists": game.already_exists,
        "companions": [companion_to_dict(c) for c in game.companions],
    }


def result_to_dict(result: ScanResult) -> dict[str, Any]:
    """Convert a scan result to a JSON-serialisable dict."""
    return {
        "status": result.status.value,
        "scanned_paths": list(result.scanned_paths),
        "total_files_scanned": result.total_files_scanned,
        "duration": round(result.duration, 3),
        "errors": list(result.errors),
        "games": [game_to_dict(g) for g in result.detected_games],
    }


# ---------------------------------------------------------------------------
# Terminal output
# ---------------------------------------------------------------------------


def print_scan_result(result: ScanResult) -> None:
    """Print a table of detected games followed by a summary line.

    Args:
        result: The finished scan.
    """
    if result.detected_games:
        table = Table(title="Detected Games", show_header=True, header_style="bold")
        table.add_column("Game", style="bold")
        table.add_column("Executable")
        table.add_column("Confidence", justify="right")
        table.add_column("Source", justify="center")
        table.add_column("Companions", justify="right")
        table.add_column("In Library", justify="center")

        for game in result.detected_games:
            source = "signature" if game.matched_signature else "heuristic"
            in_library = Text("yes", style="dim") if game.already_exists else Text("new", style="green")
            table.add_row(
                game.name,
                game.executable_name,
                Text(f"{game.confidence_score:.2f}", style=confidence_style(game.confidence_score)),
                source,
                str(len(game.companions)),
                in_library,
            )
        console.print(table)
    else:
        console.print("[dim]No games found.[/dim]")

    for error in result.errors:
        console.print(f"[yellow]warning:[/yellow] {error}")
    _print_scan_summary(result)


def _print_scan_summary(result: ScanResult) -> None:
    """Print a one-line summary after the results table."""
    status = Text(result.status.value.upper(), style=_STATUS_STYLES.get(result.status, "white"))
    new = sum(1 for g in result.detected_games if not g.already_exists)
    parts = [
        f"[bold]{len(result.detected_games)}[/bold] games found",
        f"[green]{new} new[/green]",
        f"{result.total_files_scanned} files scanned",
        f"{len(result.scanned_paths)} roots",
        f"{result.duration:.2f}s",
    ]
    console.print(status, " | ".join(parts))


def print_game_detail(game: DetectedGame) -> None:
    """Print one detection with its reasons and companions."""
    header = Text.assemble(
        ("Game: ", "bold"), (game.name, ""),
        ("  Confidence: ", "bold"),
        (f"{game.confidence_score:.2f}", confidence_style(game.confidence_score)),
    )
    console.print(Panel(header, title="Identification Result"))

    details = Table(show_header=False, box=None)
    details.add_column("Field", style="bold")
    details.add_column("Value")
    for label, value in (
        ("Short name", game.short_name),
        ("Publisher", game.publisher),
        ("Version", game.version),
        ("Executable", game.install_path),
        ("Signature", game.matched_signature.name if game.matched_signature else "-"),
        ("In library", "yes" if game.already_exists else "no"),
    ):
        details.add_row(label, value or "-")
    console.print(details)

    for reason in game.detection_reasons:
        console.print(f"  [dim]-[/dim] {reason}")

    if game.companions:
        table = Table(title="Companions", show_header=True)
        table.add_column("Name", style="bold")
        table.add_column("Path")
        table.add_column("Confidence", justify="right")
        for companion in game.companions:
            table.add_row(
                companion.name,
                companion.executable_path,
                f"{companion.confidence_score:.2f}",
            )
        console.print(table)


def print_validation_results(rows: Sequence[tuple[str, ValidationResult]]) -> None:
    """Print a validation table, one row per signature.

    Args:
        rows: (signature name, result) pairs in file order.
    """
    table = Table(title="Signature Validation", show_header=True, header_style="bold")
    table.add_column("Signature", style="bold")
    table.add_column("Level", justify="center")
    table.add_column("Messages")
    for name, result in rows:
        messages = [f"error: {e}" for e in result.errors]
        messages += [f"warning: {w}" for w in result.warnings]
        table.add_row(
            name or "(unnamed)",
            Text(result.level.name, style=_LEVEL_STYLES[result.level]),
            "\n".join(messages) or "-",
        )
    console.print(table)
    invalid = sum(1 for _, r in rows if not r.is_valid)
    console.print(f"[bold]{len(rows)}[/bold] signatures checked | {invalid} invalid")
