"""Cancellable, chunked directory scanner.

The scanner walks each existing root, filters candidates, and runs every
candidate through the ``ExecutableIdentifier``. It is a single cooperative
worker: nothing is parallelised, so scores and result order are
deterministic for a given filesystem enumeration.

Scan Algorithm:
    1. Enumerate candidates under every existing root (recursive or top
       level). Unreadable directories are recorded in ``errors`` and the
       walk continues. The cancel signal is checked per directory.
    2. Process candidates in fixed-size chunks. The cancel signal is
       checked before each chunk and before each file.
    3. Identify each file; signature hits also get their companions.
    4. Report progress per root, every few files, and per game found.
    5. Emit a final progress event and return the aggregated result.

State machine: ``IDLE -> SCANNING -> COMPLETED | CANCELLED | FAILED``.
"""

from __future__ import annotations

import logging
import os
import time
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Iterable, Protocol, Sequence

from gamefinder.core.config import DEFAULT_CONFIG, DetectionConfig
from gamefinder.core.identifier import CompanionCatalog, ExecutableIdentifier
from gamefinder.core.metadata import MetadataReader, read_binary_metadata
from gamefinder.core.models import (
    DetectedGame,
    GameSignature,
    ScanProgress,
    ScanResult,
    ScanStatus,
)
from gamefinder.exceptions import ScanInProgressError

if TYPE_CHECKING:
    from gamefinder.sources import ProgressSink

logger = logging.getLogger(__name__)


def file_identity(path: str | Path) -> str:
    """Identity key for a file: symlinks resolved, case folded only where the OS does."""
    return os.path.normcase(os.path.realpath(path))


class CancellationSignal(Protocol):
    """Anything with ``is_set()``; normally a ``threading.Event``."""

    def is_set(self) -> bool: ...


class _ScanCancelled(Exception):
    """Internal control flow: the cancel signal was observed."""


class DirectoryScanner:
    """Scans directories for games.

    Usage::

        scanner = DirectoryScanner(signatures)
        cancel = threading.Event()
        result = scanner.scan(["/games"], cancel=cancel, progress=print)
    """

    def __init__(
        self,
        signatures: Sequence[GameSignature] = (),
        companions: CompanionCatalog | None = None,
        config: DetectionConfig = DEFAULT_CONFIG,
        metadata_reader: MetadataReader = read_binary_metadata,
    ) -> None:
        self.signatures = tuple(signatures)
        self.companions = dict(companions or {})
        self.config = config
        self.identifier = ExecutableIdentifier(config, metadata_reader)
        self.state = ScanStatus.IDLE

    # -- Enumeration --

    def _walk(
        self,
        root: Path,
        recursive: bool,
        errors: list[str],
        check_cancel: Callable[[], None] | None = None,
    ) -> Iterable[Path]:
        """Yield files under ``root`` in sorted order, recording access errors.

        ``check_cancel`` runs before each directory is listed.
        """
        stack = [root]
        while stack:
            directory = stack.pop()
            if check_cancel is not None:
                check_cancel()
            try:
                with os.scandir(directory) as it:
                    entries = sorted(it, key=lambda e: e.name.lower())
            except PermissionError:
                errors.append(f"Access denied to directory: {directory}")
                continue
            except OSError as exc:
                errors.append(f"Error accessing directory {directory}: {exc}")
                continue

            subdirs: list[Path] = []
            for entry in entries:
                try:
                    if entry.is_dir(follow_symlinks=False):
                        subdirs.append(Path(entry.path))
                    elif entry.is_file():
                        yield Path(entry.path)
                except OSError:
                    logger.debug("Skipping unreadable entry %s", entry.path)
            if recursive:
                stack.extend(reversed(subdirs))

    def collect_candidates(
        self,
        roots: Iterable[str | Path],
        recursive: bool,
        result: ScanResult,
        check_cancel: Callable[[], None] | None = None,
    ) -> list[tuple[str, list[Path]]]:
        """Enumerate and filter candidates per existing root.

        Missing roots are skipped. A file reachable from more than one root
        is kept under the first root only. Files are compared by
        ``file_identity``, so ``Doom.exe`` and ``doom.exe`` stay distinct on
        case-sensitive filesystems.
        """
        path_filter = self.identifier.path_filter
        seen_roots: set[str] = set()
        seen_files: set[str] = set()
        groups: list[tuple[str, list[Path]]] = []
        for raw_root in roots:
            root = Path(raw_root).absolute()
            if not root.is_dir():
                logger.info("Skipping missing search root %s", root)
                continue
            key = file_identity(root)
            if key in seen_roots:
                continue
            seen_roots.add(key)
            result.scanned_paths.append(str(root))

            paths: list[Path] = []
            for path in self._walk(root, recursive, result.errors, check_cancel):
                if not path_filter.is_candidate(path.name):
                    continue
                key = file_identity(path)
                if key not in seen_files:
                    seen_files.add(key)
                    paths.append(path)
            groups.append((str(root), paths))
        return groups

    # -- Scanning --

    def scan(
        self,
        roots: Iterable[str | Path],
        recursive: bool = True,
        cancel: CancellationSignal | None = None,
        progress: ProgressSink | None = None,
    ) -> ScanResult:
        """Scan roots for games.

        Args:
            roots: Directories to walk. Missing ones are skipped.
            recursive: Descend into subdirectories.
            cancel: Cooperative cancellation signal.
            progress: Receives ``ScanProgress`` events.

        Returns:
            A ``ScanResult``; cancelled scans keep their partial results.

        Raises:
            ScanInProgressError: If this scanner is already scanning.
        """
        if self.state is ScanStatus.SCANNING:
            raise ScanInProgressError("A scan is already running on this scanner")
        self.state = ScanStatus.SCANNING

        result = ScanResult(status=ScanStatus.SCANNING)
        started = time.perf_counter()
        scanned = 0
        total = 0

        def notify(status: str, current_path: str = "") -> None:
            if progress is None:
                return
            event = ScanProgress(
                status=status,
                files_scanned=scanned,
                total_files=total,
                games_found=len(result.detected_games),
                current_path=current_path,
            )
            try:
                progress(event)
            except Exception:
                logger.warning("Progress sink raised", exc_info=True)

        def check_cancel() -> None:
            if cancel is not None and cancel.is_set():
                raise _ScanCancelled

        try:
            check_cancel()
            groups = self.collect_candidates(roots, recursive, result, check_cancel)
            total = sum(len(paths) for _, paths in groups)
            logger.debug("Found %d candidate files in %d roots", total, len(groups))

            chunk_size = max(1, self.config.chunk_size)
            interval = max(1, self.config.progress_interval)
            for root, paths in groups:
                check_cancel()
                notify(f"Scanning {root}...", root)
                for start in range(0, len(paths), chunk_size):
                    check_cancel()
                    for path in paths[start:start + chunk_size]:
                        check_cancel()
                        scanned += 1
                        game = self._identify(path)
                        if game is not None:
                            result.detected_games.append(game)
                            notify(f"Found: {game.name}", str(path))
                        if scanned % interval == 0:
                            notify(f"Scanning... ({scanned}/{total})", str(path))
                    # Let progress consumers drain between chunks.
                    time.sleep(0)
            result.status = ScanStatus.COMPLETED
        except _ScanCancelled:
            logger.info("Scan cancelled after %d files", scanned)
            result.status = ScanStatus.CANCELLED
        except Exception as exc:
            logger.warning("Unexpected error during scanning", exc_info=True)
            result.errors.append(f"Unexpected error during scanning: {exc}")
            result.status = ScanStatus.FAILED
        finally:
            result.total_files_scanned = scanned
            result.duration = time.perf_counter() - started
            self.state = result.status

        final = {
            ScanStatus.COMPLETED: "Scan completed",
            ScanStatus.CANCELLED: "Scan cancelled",
        }.get(result.status, "Scan failed")
        notify(final)
        return result

    def _identify(self, path: Path) -> DetectedGame | None:
        """Identify one file; per-file failures skip the file."""
        try:
            return self.identifier.identify(path, self.signatures, self.companions)
        except Exception:
            logger.warning("Error identifying executable %s", path, exc_info=True)
            return None
