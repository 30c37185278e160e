"""Signature-then-heuristic identification of a single executable.

``ExecutableIdentifier`` is the per-file pipeline shared by the directory
scanner and the single-file lookup:

1. Read binary metadata (absent metadata is not an error).
2. Try every game signature; accept the best score above the threshold.
3. On a miss, fall back to the heuristic identifier.
4. For signature hits, look for companions next to the executable.
"""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import Mapping, Sequence

from gamefinder.core.companion_matcher import CompanionMatcher
from gamefinder.core.config import DEFAULT_CONFIG, DetectionConfig
from gamefinder.core.heuristics import HeuristicIdentifier
from gamefinder.core.metadata import MetadataReader, read_binary_metadata
from gamefinder.core.models import (
    CandidateFile,
    CompanionSignature,
    DetectedGame,
    GameSignature,
)
from gamefinder.core.path_filter import PathFilter
from gamefinder.core.signature_matcher import SignatureMatcher

CompanionCatalog = Mapping[int, Sequence[CompanionSignature]]


class ExecutableIdentifier:
    """Identifies one executable as a game, with its companions.

    Usage::

        identifier = ExecutableIdentifier()
        game = identifier.identify(Path("/games/Hades/Hades.exe"), signatures)
        if game is not None:
            print(game.name, game.confidence_score)
    """

    def __init__(
        self,
        config: DetectionConfig = DEFAULT_CONFIG,
        metadata_reader: MetadataReader = read_binary_metadata,
    ) -> None:
        self.config = config
        self.path_filter = PathFilter(config)
        self.signature_matcher = SignatureMatcher(config)
        self.heuristics = HeuristicIdentifier(config)
        self.companion_matcher = CompanionMatcher(config)
        self._read_metadata = metadata_reader

    def identify(
        self,
        path: Path,
        signatures: Sequence[GameSignature],
        companions: CompanionCatalog | None = None,
    ) -> DetectedGame | None:
        """Identify ``path`` or return None when nothing clears a threshold.

        Args:
            path: Absolute path to a candidate executable.
            signatures: Game signatures in declaration order.
            companions: Companion signatures keyed by game signature id.

        Returns:
            The detection, with companions attached for signature hits.
        """
        candidate = CandidateFile(path=path, metadata=self._read_metadata(path))

        match = self.signature_matcher.match(candidate, signatures)
        if match is None:
            return self.heuristics.identify(candidate)

        game = SignatureMatcher.apply(
            DetectedGame(
                name="",
                install_path=str(path),
                game_working_path=str(path.parent),
                executable_name=path.name,
            ),
            match,
        )
        if not game.name:
            return None

        scoped = (companions or {}).get(match.signature.id, ())
        if scoped:
            found = self.companion_matcher.find_companions(
                game, scoped, self.path_filter, self._read_metadata,
            )
            if found:
                game = replace(game, companions=found)
        return game
