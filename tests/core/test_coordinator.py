"""Tests for DetectionCoordinator root resolution, de-duplication and lookups."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from gamefinder.core.coordinator import NO_ROOTS_ERROR, DetectionCoordinator
from gamefinder.core.models import BinaryMetadata, DetectedGame, ScanStatus
from gamefinder.sources import (
    StaticLibrarySource,
    StaticSearchPathSource,
    StaticSignatureSource,
)

from tests.core.helpers import (
    FakeMetadataReader,
    hades_signature,
    launcher_companion,
    make_exe,
)


def _coordinator(
    library: StaticLibrarySource | None = None,
    search_paths: StaticSearchPathSource | None = None,
    defaults: list[str] | None = None,
    reader: FakeMetadataReader | None = None,
) -> DetectionCoordinator:
    return DetectionCoordinator(
        StaticSignatureSource([hades_signature()], [launcher_companion()]),
        library_source=library,
        search_path_source=search_paths,
        metadata_reader=reader or FakeMetadataReader(),
        default_roots=lambda: list(defaults or []),
    )


class TestResolveSearchRoots:
    """Explicit, then configured, then platform default roots."""

    def test_explicit_roots_win(self, tmp_path: Path) -> None:
        explicit = tmp_path / "explicit"
        configured = tmp_path / "configured"
        explicit.mkdir()
        configured.mkdir()
        coordinator = _coordinator(search_paths=StaticSearchPathSource([str(configured)]))
        assert coordinator.resolve_search_roots([explicit]) == [str(explicit)]

    def test_configured_roots(self, tmp_path: Path) -> None:
        coordinator = _coordinator(
            search_paths=StaticSearchPathSource([str(tmp_path)]),
            defaults=["/nonexistent-default"],
        )
        assert coordinator.resolve_search_roots() == [str(tmp_path)]

    def test_defaults_when_nothing_configured(self, tmp_path: Path) -> None:
        coordinator = _coordinator(
            search_paths=StaticSearchPathSource([]), defaults=[str(tmp_path)],
        )
        assert coordinator.resolve_search_roots() == [str(tmp_path)]

    def test_missing_directories_dropped(self, tmp_path: Path) -> None:
        coordinator = _coordinator()
        assert coordinator.resolve_search_roots([tmp_path / "nope", tmp_path]) == [str(tmp_path)]

    def test_duplicates_dropped(self, tmp_path: Path) -> None:
        coordinator = _coordinator()
        assert coordinator.resolve_search_roots([tmp_path, tmp_path]) == [str(tmp_path)]


class TestScan:
    """Full detection runs through the coordinator."""

    def test_no_usable_roots(self, tmp_path: Path) -> None:
        result = _coordinator().scan([tmp_path / "nope"])
        assert result.status is ScanStatus.FAILED
        assert result.scanned_paths == []
        assert result.errors == [NO_ROOTS_ERROR]
        assert result.detected_games == []

    def test_no_roots_and_no_defaults(self) -> None:
        result = _coordinator().scan()
        assert result.status is ScanStatus.FAILED
        assert result.scanned_paths == []

    def test_scan_uses_signature_source(self, library_root: Path, hades_install: Path) -> None:
        result = _coordinator().scan([library_root])
        assert result.status is ScanStatus.COMPLETED
        hades = result.detected_games[0]
        assert hades.matched_signature == hades_signature()
        assert [c.name for c in hades.companions] == ["Mod Launcher"]

    def test_existing_game_marked_despite_full_score(
        self, library_root: Path, hades_install: Path,
    ) -> None:
        """A library path is marked even when the signature scores 1.00."""
        reader = FakeMetadataReader({"Hades.exe": BinaryMetadata(company_name="Supergiant Games")})
        coordinator = DetectionCoordinator(
            StaticSignatureSource([hades_signature(match_publisher=True)]),
            library_source=StaticLibrarySource(games=[str(hades_install / "Hades.exe")]),
            metadata_reader=reader,
        )
        result = coordinator.scan([library_root])
        hades = result.detected_games[0]
        assert hades.confidence_score == 1.0
        assert hades.already_exists is True
        launcher = result.detected_games[1]
        assert launcher.already_exists is False

    def test_existing_directory_marks_game(self, library_root: Path, hades_install: Path) -> None:
        library = StaticLibrarySource(games=[str(hades_install).upper()])
        result = _coordinator(library=library).scan([library_root])
        assert all(g.already_exists for g in result.detected_games)

    def test_existing_companion_marked(self, library_root: Path, hades_install: Path) -> None:
        library = StaticLibrarySource(companions=[str(hades_install / "Launcher.exe")])
        result = _coordinator(library=library).scan([library_root])
        hades = result.detected_games[0]
        assert hades.already_exists is False
        assert hades.companions[0].already_exists is True

    def test_blank_library_paths_ignored(self, library_root: Path, hades_install: Path) -> None:
        library = StaticLibrarySource(games=["", "   "])
        result = _coordinator(library=library).scan([library_root])
        assert not any(g.already_exists for g in result.detected_games)


class TestIdentifyOne:
    """Single-file lookups share the scan pipeline."""

    def test_identifies_with_companions(self, hades_install: Path) -> None:
        game = _coordinator().identify_one(hades_install / "Hades.exe")
        assert game is not None
        assert game.name == "Hades"
        assert len(game.companions) == 1

    def test_marks_existing(self, hades_install: Path) -> None:
        library = StaticLibrarySource(games=[str(hades_install / "Hades.exe")])
        game = _coordinator(library=library).identify_one(str(hades_install / "Hades.exe"))
        assert game is not None
        assert game.already_exists is True

    def test_excluded_file(self, hades_install: Path) -> None:
        assert _coordinator().identify_one(hades_install / "unins000.exe") is None

    def test_not_an_executable(self, hades_install: Path) -> None:
        assert _coordinator().identify_one(hades_install / "readme.txt") is None

    def test_missing_file(self, tmp_path: Path) -> None:
        assert _coordinator().identify_one(tmp_path / "Ghost.exe") is None

    def test_directory(self, hades_install: Path) -> None:
        assert _coordinator().identify_one(hades_install) is None


class TestValidateDetectedGames:
    """Stale detections are dropped."""

    def _game(self, path: Path) -> DetectedGame:
        return DetectedGame(
            name=path.stem, install_path=str(path),
            game_working_path=str(path.parent), executable_name=path.name,
        )

    def test_keeps_existing_non_empty(self, tmp_path: Path) -> None:
        exe = make_exe(tmp_path / "alpha", "Hades.exe")
        games = [self._game(exe)]
        assert DetectionCoordinator.validate_detected_games(games) == games

    def test_drops_deleted_and_empty(self, tmp_path: Path) -> None:
        kept = make_exe(tmp_path / "alpha", "Hades.exe")
        empty = make_exe(tmp_path / "alpha", "Empty.exe", content=b"")
        deleted = make_exe(tmp_path / "alpha", "Gone.exe")
        os.remove(deleted)
        games = [self._game(p) for p in (kept, empty, deleted)]
        assert DetectionCoordinator.validate_detected_games(games) == [games[0]]

    def test_drops_directories(self, tmp_path: Path) -> None:
        assert DetectionCoordinator.validate_detected_games([self._game(tmp_path)]) == []


@pytest.mark.parametrize("roots", [None, []])
def test_empty_explicit_roots_fall_back(roots: list[str] | None, tmp_path: Path) -> None:
    make_exe(tmp_path / "alpha", "Celeste.exe")
    coordinator = _coordinator(defaults=[str(tmp_path)])
    result = coordinator.scan(roots)
    assert result.scanned_paths == [str(tmp_path)]
