"""Shared fixtures for CLI tests.

Signature files are written outside the scanned library so they never
show up as candidates themselves.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner


@pytest.fixture
def runner() -> CliRunner:
    """Create a Click CliRunner for invoking commands."""
    return CliRunner()


@pytest.fixture
def signatures_file(tmp_path: Path) -> Path:
    """A YAML catalog with one Hades signature and its mod launcher."""
    path = tmp_path / "catalog" / "signatures.yaml"
    path.parent.mkdir()
    path.write_text(
        "signatures:\n"
        "  - id: 1\n"
        "    name: Hades\n"
        "    shortName: Hades\n"
        "    executableName: Hades.exe\n"
        "    publisher: Supergiant Games\n"
        "    matchName: true\n"
        "    companions:\n"
        "      - name: Mod Launcher\n"
        "        executableName: Launcher.exe\n"
        "        matchName: true\n"
    )
    return path


@pytest.fixture
def invalid_signatures_file(tmp_path: Path) -> Path:
    """A JSON catalog whose second signature can never match."""
    path = tmp_path / "catalog" / "broken.json"
    path.parent.mkdir(exist_ok=True)
    path.write_text(json.dumps([
        {"name": "Hades", "executableName": "Hades.exe", "matchName": True},
        {"name": "Celeste", "executableName": "Celeste.exe"},
    ]))
    return path
