"""Shared test helpers for building fake game installations.

Executables are plain files with a few placeholder bytes; their version
resource comes from ``FakeMetadataReader`` instead of a real PE image.
Directory names used here avoid the game-like keywords so the heuristic
directory bonus only applies where a test asks for it.
"""

from __future__ import annotations

from pathlib import Path

from gamefinder.core.models import BinaryMetadata, CompanionSignature, GameSignature


class FakeMetadataReader:
    """Metadata reader keyed by lower-cased file name.

    Records every path it is asked about, so tests can count reads.
    """

    def __init__(self, by_name: dict[str, BinaryMetadata] | None = None) -> None:
        self.by_name = {k.lower(): v for k, v in (by_name or {}).items()}
        self.calls: list[Path] = []

    def __call__(self, path: Path) -> BinaryMetadata | None:
        self.calls.append(path)
        return self.by_name.get(path.name.lower())


def make_exe(directory: Path, name: str, content: bytes = b"MZ placeholder") -> Path:
    """Create a placeholder executable, creating parent directories."""
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / name
    path.write_bytes(content)
    return path


def hades_signature(**overrides: object) -> GameSignature:
    """A name-matching signature for Hades.exe."""
    values: dict[str, object] = {
        "id": 1,
        "short_name": "Hades",
        "name": "Hades",
        "description": "Rogue-like dungeon crawler",
        "executable_name": "Hades.exe",
        "publisher": "Supergiant Games",
        "version": "1.38",
        "game_args": "-windowed",
        "game_image": "hades.png",
        "theme_name": "underworld",
        "match_name": True,
    }
    values.update(overrides)
    return GameSignature(**values)  # type: ignore[arg-type]


def launcher_companion(**overrides: object) -> CompanionSignature:
    """A name-only companion signature for Launcher.exe scoped to Hades."""
    values: dict[str, object] = {
        "id": 1,
        "game_signature_id": 1,
        "name": "Mod Launcher",
        "description": "Loads mods before the game starts",
        "executable_name": "Launcher.exe",
        "companion_args": "--mods",
        "match_name": True,
    }
    values.update(overrides)
    return CompanionSignature(**values)  # type: ignore[arg-type]
