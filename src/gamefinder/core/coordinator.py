"""Top-level orchestration of a detection run.

``DetectionCoordinator`` is the entry point most callers want. It resolves
which directories to scan, snapshots signatures and the existing library,
drives a fresh ``DirectoryScanner``, and marks detections that are already
in the library.

Root resolution order:
    1. Roots passed explicitly to ``scan``.
    2. Roots from the ``SearchPathSource``.
    3. Platform defaults from ``default_search_roots()``.

Only directories that exist survive resolution. When nothing survives, the
scan returns a FAILED result with zero scanned paths instead of raising.
"""

from __future__ import annotations

import logging
import os
from dataclasses import replace
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Iterable, Sequence

from gamefinder.core.config import DEFAULT_CONFIG, DetectionConfig, default_search_roots
from gamefinder.core.identifier import ExecutableIdentifier
from gamefinder.core.metadata import MetadataReader, read_binary_metadata
from gamefinder.core.models import (
    CompanionSignature,
    DetectedGame,
    ExistingIndex,
    GameSignature,
    ScanResult,
    ScanStatus,
)
from gamefinder.core.scanner import CancellationSignal, DirectoryScanner

if TYPE_CHECKING:
    from gamefinder.sources import (
        LibrarySource,
        ProgressSink,
        SearchPathSource,
        SignatureSource,
    )

logger = logging.getLogger(__name__)

NO_ROOTS_ERROR = "No valid search paths found. Add a search path and try again."


def mark_existing(game: DetectedGame, index: ExistingIndex) -> DetectedGame:
    """Return ``game`` with ``already_exists`` set on it and its companions."""
    companions = tuple(
        replace(c, already_exists=index.contains_companion(c.executable_path))
        for c in game.companions
    )
    return replace(
        game,
        already_exists=index.contains_game(game.install_path),
        companions=companions,
    )


class DetectionCoordinator:
    """Resolves roots, runs the scanner and de-duplicates against the library.

    Usage::

        coordinator = DetectionCoordinator(StaticSignatureSource(signatures))
        result = coordinator.scan(["/games"])
        new_games = [g for g in result.detected_games if not g.already_exists]
    """

    def __init__(
        self,
        signature_source: SignatureSource,
        library_source: LibrarySource | None = None,
        search_path_source: SearchPathSource | None = None,
        config: DetectionConfig = DEFAULT_CONFIG,
        metadata_reader: MetadataReader = read_binary_metadata,
        default_roots: Callable[[], list[str]] = default_search_roots,
    ) -> None:
        self.signature_source = signature_source
        self.library_source = library_source
        self.search_path_source = search_path_source
        self.config = config
        self._metadata_reader = metadata_reader
        self._default_roots = default_roots
        self._identifier = ExecutableIdentifier(config, metadata_reader)

    def resolve_search_roots(
        self, roots: Iterable[str | Path] | None = None,
    ) -> list[str]:
        """Pick explicit, configured or default roots; keep existing dirs."""
        candidates = [str(r) for r in roots or ()]
        if not candidates and self.search_path_source is not None:
            candidates = [r for r in self.search_path_source.list_configured_roots() if r]
        if not candidates:
            candidates = list(self._default_roots())
            logger.debug("Using %d platform default search roots", len(candidates))
        return [r for r in dict.fromkeys(candidates) if os.path.isdir(r)]

    def build_existing_index(self) -> ExistingIndex:
        """Snapshot the library into an ``ExistingIndex``."""
        if self.library_source is None:
            return ExistingIndex()
        return ExistingIndex.build(
            self.library_source.list_existing_games(),
            self.library_source.list_existing_companions(),
        )

    def _snapshot_signatures(
        self,
    ) -> tuple[tuple[GameSignature, ...], dict[int, tuple[CompanionSignature, ...]]]:
        signatures = tuple(self.signature_source.list_game_signatures())
        companions: dict[int, tuple[CompanionSignature, ...]] = {}
        for sig in signatures:
            scoped = tuple(self.signature_source.list_companion_signatures(sig.id))
            if scoped:
                companions[sig.id] = scoped
        return signatures, companions

    def scan(
        self,
        roots: Iterable[str | Path] | None = None,
        recursive: bool = True,
        cancel: CancellationSignal | None = None,
        progress: ProgressSink | None = None,
    ) -> ScanResult:
        """Run one detection pass.

        Args:
            roots: Explicit roots; falls back to configured then defaults.
            recursive: Descend into subdirectories.
            cancel: Cooperative cancellation signal.
            progress: Receives ``ScanProgress`` events.

        Returns:
            The scan result with ``already_exists`` marked on detections.
        """
        resolved = self.resolve_search_roots(roots)
        if not resolved:
            logger.info("No usable search roots")
            return ScanResult(errors=[NO_ROOTS_ERROR], status=ScanStatus.FAILED)

        signatures, companions = self._snapshot_signatures()
        index = self.build_existing_index()
        logger.info(
            "Scanning %d roots with %d signatures", len(resolved), len(signatures),
        )

        scanner = DirectoryScanner(
            signatures, companions, self.config, self._metadata_reader,
        )
        result = scanner.scan(resolved, recursive=recursive, cancel=cancel, progress=progress)
        result.detected_games = [mark_existing(g, index) for g in result.detected_games]
        return result

    def identify_one(self, path: str | Path) -> DetectedGame | None:
        """Identify a single file without walking a directory.

        Returns None when the path is not a file, is filtered out, or clears
        no threshold.
        """
        file_path = Path(path).absolute()
        if not file_path.is_file() or not self._identifier.path_filter.is_candidate(file_path.name):
            return None
        signatures, companions = self._snapshot_signatures()
        game = self._identifier.identify(file_path, signatures, companions)
        if game is None:
            return None
        return mark_existing(game, self.build_existing_index())

    @staticmethod
    def validate_detected_games(games: Sequence[DetectedGame]) -> list[DetectedGame]:
        """Keep detections whose executable still exists and is non-empty."""
        valid: list[DetectedGame] = []
        for game in games:
            try:
                if os.path.isfile(game.install_path) and os.path.getsize(game.install_path) > 0:
                    valid.append(game)
            except OSError:
                logger.debug("Dropping stale detection %s", game.install_path)
        return valid
