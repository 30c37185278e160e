"""Data models for game detection: signatures, detections, and scan results.

These are the value types produced and consumed by the detection pipeline.
They are intentionally decoupled from the matchers and the scanner so that
downstream modules (CLI formatters, library importers) can import them
without pulling in the filesystem walking logic.

Reference data (signatures) and detection results are frozen. A detection
is created fresh for each scan; marking it as already present in the
library produces a new value via ``dataclasses.replace``.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterable


def normalize_path(path: str | Path) -> str:
    """Return the lower-cased, normalised form of a path used for lookups."""
    return os.path.normpath(str(path)).lower()


def clamp_score(value: float) -> float:
    """Clamp a confidence score to [0, 1], rounded to absorb float noise."""
    return round(min(max(value, 0.0), 1.0), 6)


# ---------------------------------------------------------------------------
# Signatures: immutable reference data
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class GameSignature:
    """A stored template describing how to recognise one game executable.

    Attributes:
        id: Storage identity of the signature.
        short_name: Abbreviated display name (10 characters or less).
        name: Full display name of the game.
        description: Free-form description copied onto detections.
        executable_name: File name of the game executable (e.g. "Game.exe").
        publisher: Expected company name in the binary's version resource.
        version: Expected product version. Never used for game scoring.
        meta_name: Expected product name in the binary's version resource.
        game_args: Default launch arguments.
        game_image: Cover image path or URL.
        theme_name: Launcher theme associated with the game.
        match_name: Enable executable name matching.
        match_version: Enable version matching.
        match_publisher: Enable publisher matching.
    """

    id: int = 0
    short_name: str = ""
    name: str = ""
    description: str = ""
    executable_name: str = ""
    publisher: str = ""
    version: str = ""
    meta_name: str = ""
    game_args: str = ""
    game_image: str = ""
    theme_name: str = ""
    match_name: bool = False
    match_version: bool = False
    match_publisher: bool = False

    @property
    def has_match_criteria(self) -> bool:
        """True when at least one match flag is enabled."""
        return self.match_name or self.match_version or self.match_publisher


@dataclass(frozen=True)
class CompanionSignature:
    """A template for a helper executable that travels with a specific game.

    Companions (overlays, launchers, mod tools) are only ever matched next
    to a game that was identified through its ``GameSignature``.
    """

    id: int = 0
    game_signature_id: int = 0
    name: str = ""
    description: str = ""
    executable_name: str = ""
    companion_args: str = ""
    version: str = ""
    publisher: str = ""
    meta_name: str = ""
    match_name: bool = False
    match_version: bool = False
    match_publisher: bool = False


# ---------------------------------------------------------------------------
# Candidate files
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BinaryMetadata:
    """Version-resource strings read from an executable.

    Missing fields are empty strings. The absence of metadata as a whole is
    modelled as ``None`` wherever a ``BinaryMetadata`` is expected.
    """

    product_name: str = ""
    company_name: str = ""
    product_version: str = ""
    file_version: str = ""
    file_description: str = ""


@dataclass(frozen=True)
class CandidateFile:
    """An executable that passed the path filter, with its metadata."""

    path: Path
    metadata: BinaryMetadata | None = None

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def directory(self) -> Path:
        return self.path.parent


# ---------------------------------------------------------------------------
# Detections
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DetectedCompanion:
    """A companion executable found next to an identified game."""

    name: str
    executable_path: str
    description: str = ""
    publisher: str = ""
    version: str = ""
    companion_args: str = ""
    matched_signature: CompanionSignature | None = None
    confidence_score: float = 0.0
    detection_reasons: tuple[str, ...] = ()
    already_exists: bool = False
    type: str = "Application"


@dataclass(frozen=True)
class DetectedGame:
    """A game identified during a scan.

    Attributes:
        name: Display name (from the signature or the heuristic).
        short_name: Abbreviated name.
        install_path: Absolute path of the executable.
        game_working_path: Directory containing the executable.
        executable_name: File name of the executable.
        matched_signature: Present only for signature hits.
        confidence_score: Weighted-sum confidence in [0, 1].
        detection_reasons: Audit trail, one entry per contribution.
        already_exists: True when the path is already in the library.
        companions: Companion executables detected alongside.
    """

    name: str
    install_path: str
    game_working_path: str
    executable_name: str
    short_name: str = ""
    description: str = ""
    publisher: str = ""
    version: str = ""
    game_args: str = ""
    game_image: str = ""
    theme_name: str = ""
    matched_signature: GameSignature | None = None
    confidence_score: float = 0.0
    detection_reasons: tuple[str, ...] = ()
    already_exists: bool = False
    companions: tuple[DetectedCompanion, ...] = ()


# ---------------------------------------------------------------------------
# Scan lifecycle
# ---------------------------------------------------------------------------


class ScanStatus(Enum):
    """Lifecycle of a ``DirectoryScanner``."""

    IDLE = "idle"
    SCANNING = "scanning"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"


@dataclass(frozen=True)
class ScanProgress:
    """A progress notification delivered to the progress sink."""

    status: str
    files_scanned: int
    total_files: int
    games_found: int
    current_path: str = ""


@dataclass
class ScanResult:
    """Complete result of a scan.

    Attributes:
        detected_games: Games identified, in processing order.
        scanned_paths: Roots that were walked.
        errors: Non-fatal error descriptions (access denied, bad roots).
        total_files_scanned: Candidate files actually processed.
        duration: Elapsed wall-clock time in seconds.
        status: Terminal state of the scan.
    """

    detected_games: list[DetectedGame] = field(default_factory=list)
    scanned_paths: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    total_files_scanned: int = 0
    duration: float = 0.0
    status: ScanStatus = ScanStatus.IDLE

    @property
    def is_successful(self) -> bool:
        """True when no errors were recorded."""
        return not self.errors

    @property
    def was_cancelled(self) -> bool:
        return self.status is ScanStatus.CANCELLED


# ---------------------------------------------------------------------------
# De-duplication index
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ExistingIndex:
    """Lower-cased paths already present in the game library.

    Built once per scan from the library collaborator and used purely for
    de-duplication lookups.
    """

    game_paths: frozenset[str] = frozenset()
    companion_paths: frozenset[str] = frozenset()

    @classmethod
    def build(
        cls,
        game_paths: Iterable[str | Path] = (),
        companion_paths: Iterable[str | Path] = (),
    ) -> ExistingIndex:
        """Create an index from raw library paths, skipping blanks."""
        return cls(
            game_paths=frozenset(normalize_path(p) for p in game_paths if str(p).strip()),
            companion_paths=frozenset(
                normalize_path(p) for p in companion_paths if str(p).strip()
            ),
        )

    def contains_game(self, executable_path: str | Path) -> bool:
        """Check the executable path and its containing directory."""
        path = Path(executable_path)
        return (
            normalize_path(path) in self.game_paths
            or normalize_path(path.parent) in self.game_paths
        )

    def contains_companion(self, path: str | Path) -> bool:
        return normalize_path(path) in self.companion_paths
