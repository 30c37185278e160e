"""Immutable detection configuration and platform default search roots.

``DetectionConfig`` bundles every tunable used by the path filter, the
matchers and the scanner: the executable extension allow-list, exclude
glob patterns, game-like directory keywords, chunking parameters, the
acceptance thresholds and the scoring weights. It is a frozen value
constructed once and passed into each component; ``DEFAULT_CONFIG`` is
the shared default.

Default search roots are computed per platform. Nothing here reads settings
files or environment configuration beyond the well-known folder variables
(``ProgramFiles``, ``LOCALAPPDATA`` ...) needed to locate store libraries.
"""

from __future__ import annotations

import os
import platform
import string
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping

EXECUTABLE_EXTENSIONS: frozenset[str] = frozenset({".exe", ".bat", ".cmd", ".sh"})

# Installers, uninstallers, updaters, patchers, redistributables and
# crash/debug/test binaries, for every executable extension. ``*`` is the
# only wildcard.
EXCLUDE_PATTERNS: tuple[str, ...] = (
    "unins*.*",
    "*uninstall*.*",
    "*setup*.*",
    "*install*.*",
    "*updater*.*",
    "*patcher*.*",
    "vcredist*.*",
    "*redist*.*",
    "directx*.*",
    "dxsetup.*",
    "*crash*.*",
    "*error*.*",
    "*report*.*",
    "*debug*.*",
    "*test*.*",
)

GAME_DIRECTORY_KEYWORDS: tuple[str, ...] = (
    "game",
    "games",
    "play",
    "steam",
    "gog",
    "epic",
    "origin",
    "launcher",
    "client",
    "studio",
    "entertainment",
    "software",
)


@dataclass(frozen=True)
class ScoringWeights:
    """Weights for every confidence contribution.

    Game signature weights: ``name_exact`` / ``name_partial`` (mutually
    exclusive), ``publisher`` and ``product_name``. Heuristic weights start
    with ``heuristic_filename``. Companion weights start with
    ``companion_``.
    """

    name_exact: float = 0.70
    name_partial: float = 0.35
    publisher: float = 0.30
    product_name: float = 0.25

    heuristic_filename: float = 0.30
    heuristic_product_name: float = 0.40
    heuristic_company: float = 0.10
    heuristic_version: float = 0.10
    heuristic_description: float = 0.10
    heuristic_directory: float = 0.20

    companion_name: float = 0.60
    companion_description: float = 0.30
    companion_publisher: float = 0.20
    companion_version: float = 0.10


@dataclass(frozen=True)
class DetectionConfig:
    """Tunables shared by the detection components.

    Attributes:
        executable_extensions: Lower-case extensions (with dot) that make a
            file a scan candidate.
        exclude_patterns: Case-insensitive file name globs that are never
            candidates.
        game_directory_keywords: Substrings that make a directory name look
            like a game folder to the heuristic.
        chunk_size: Files processed between cancellation checkpoints.
        progress_interval: Emit a progress event every N files.
        signature_threshold: Signature scores must be strictly above this.
        heuristic_threshold: Heuristic scores must be at least this.
        companion_threshold: Companion scores must be at least this.
        weights: Scoring weights.
    """

    executable_extensions: frozenset[str] = EXECUTABLE_EXTENSIONS
    exclude_patterns: tuple[str, ...] = EXCLUDE_PATTERNS
    game_directory_keywords: tuple[str, ...] = GAME_DIRECTORY_KEYWORDS
    chunk_size: int = 50
    progress_interval: int = 5
    signature_threshold: float = 0.5
    heuristic_threshold: float = 0.3
    companion_threshold: float = 0.5
    weights: ScoringWeights = field(default_factory=ScoringWeights)


DEFAULT_CONFIG = DetectionConfig()


# ---------------------------------------------------------------------------
# Platform default search roots
# ---------------------------------------------------------------------------


def current_platform(system: str | None = None) -> str:
    """Return "windows", "macos" or "linux"."""
    name = (system or platform.system()).lower()
    if name in ("darwin", "macos"):
        return "macos"
    return "windows" if name == "windows" else "linux"


def _windows_roots(env: Mapping[str, str]) -> list[str]:
    program_files = env.get("ProgramFiles", r"C:\Program Files")
    program_files_x86 = env.get("ProgramFiles(x86)", r"C:\Program Files (x86)")
    roots = [
        program_files,
        program_files_x86,
        os.path.join(program_files, "Steam", "steamapps", "common"),
        os.path.join(program_files_x86, "Steam", "steamapps", "common"),
        r"C:\Steam\steamapps\common",
        r"D:\Steam\steamapps\common",
        r"E:\Steam\steamapps\common",
        os.path.join(program_files, "Epic Games"),
        os.path.join(program_files_x86, "GOG Galaxy", "Games"),
        r"C:\GOG Games",
        os.path.join(program_files_x86, "Origin Games"),
        os.path.join(program_files, "Battle.net"),
        os.path.join(program_files_x86, "Battle.net"),
    ]
    local_app_data = env.get("LOCALAPPDATA")
    if local_app_data:
        roots.append(os.path.join(local_app_data, "Microsoft", "WindowsApps"))
    roots.extend(f"{drive}:\\Games" for drive in string.ascii_uppercase[2:])
    return roots


def _linux_roots(home: Path) -> list[str]:
    return [
        str(home / ".steam" / "steam" / "steamapps" / "common"),
        str(home / ".local" / "share" / "Steam" / "steamapps" / "common"),
        str(home / "Games"),
        str(home / "GOG Games"),
        str(home / ".local" / "share" / "lutris" / "games"),
        str(home / "Games" / "Heroic"),
        "/usr/games",
        "/usr/local/games",
    ]


def _macos_roots(home: Path) -> list[str]:
    return [
        "/Applications",
        str(home / "Applications"),
        str(home / "Library" / "Application Support" / "Steam" / "steamapps" / "common"),
    ]


def default_search_roots(
    system: str | None = None,
    home: Path | None = None,
    env: Mapping[str, str] | None = None,
    existing_only: bool = True,
) -> list[str]:
    """Build the platform default list of game installation directories.

    Args:
        system: Override ``platform.system()`` (for testing).
        home: Override the home directory (for testing).
        env: Override ``os.environ`` (for testing).
        existing_only: Drop directories that do not exist.

    Returns:
        De-duplicated list of directories, in priority order.
    """
    plat = current_platform(system)
    home_dir = home if home is not None else Path.home()
    environ = env if env is not None else os.environ

    if plat == "windows":
        roots = _windows_roots(environ)
    elif plat == "macos":
        roots = _macos_roots(home_dir)
    else:
        roots = _linux_roots(home_dir)

    roots = list(dict.fromkeys(roots))
    if existing_only:
        roots = [r for r in roots if os.path.isdir(r)]
    return roots
