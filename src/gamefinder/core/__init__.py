"""Game detection engine: filtering, matching, scanning and orchestration.

Public API::

    from gamefinder.core import DetectionCoordinator
    from gamefinder.sources import StaticSignatureSource

    coordinator = DetectionCoordinator(StaticSignatureSource(signatures))
    result = coordinator.scan(["/games"])
    for game in result.detected_games:
        print(game.name, game.confidence_score)
"""

from __future__ import annotations

from gamefinder.core.companion_matcher import CompanionMatch, CompanionMatcher
from gamefinder.core.config import (
    DEFAULT_CONFIG,
    DetectionConfig,
    ScoringWeights,
    default_search_roots,
)
from gamefinder.core.coordinator import DetectionCoordinator
from gamefinder.core.heuristics import HeuristicIdentifier, clean_game_name, generate_short_name
from gamefinder.core.identifier import ExecutableIdentifier
from gamefinder.core.metadata import read_binary_metadata
from gamefinder.core.models import (
    BinaryMetadata,
    CandidateFile,
    CompanionSignature,
    DetectedCompanion,
    DetectedGame,
    ExistingIndex,
    GameSignature,
    ScanProgress,
    ScanResult,
    ScanStatus,
)
from gamefinder.core.path_filter import PathFilter
from gamefinder.core.scanner import DirectoryScanner
from gamefinder.core.signature_matcher import SignatureMatch, SignatureMatcher

__all__ = [
    "BinaryMetadata",
    "CandidateFile",
    "CompanionMatch",
    "CompanionMatcher",
    "CompanionSignature",
    "DEFAULT_CONFIG",
    "DetectedCompanion",
    "DetectedGame",
    "DetectionConfig",
    "DetectionCoordinator",
    "DirectoryScanner",
    "ExecutableIdentifier",
    "ExistingIndex",
    "GameSignature",
    "HeuristicIdentifier",
    "PathFilter",
    "ScanProgress",
    "ScanResult",
    "ScanStatus",
    "ScoringWeights",
    "SignatureMatch",
    "SignatureMatcher",
    "clean_game_name",
    "default_search_roots",
    "generate_short_name",
    "read_binary_metadata",
]
