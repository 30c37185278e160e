"""Companion signature matching and discovery.

Companions are helper executables (overlays, launchers, mod tools) scoped
to a game signature. They are never guessed heuristically: an exact,
case-insensitive file name match against the companion signature's
executable name is a hard precondition, after which metadata adds
confidence:

    executable name (required) ..... 0.60
    file description ............... 0.30  (match_name; meta_name, else name)
    company name ................... 0.20  (match_publisher)
    product version ................ 0.10  (match_version)

Discovery looks at the top level of the game's directory and of its parent.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from gamefinder.core.config import DEFAULT_CONFIG, DetectionConfig
from gamefinder.core.metadata import MetadataReader, read_binary_metadata
from gamefinder.core.models import (
    CandidateFile,
    CompanionSignature,
    DetectedCompanion,
    DetectedGame,
    clamp_score,
    normalize_path,
)
from gamefinder.core.path_filter import PathFilter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompanionMatch:
    """An accepted companion signature with its score and audit trail."""

    signature: CompanionSignature
    score: float
    reasons: tuple[str, ...]


def _contains(haystack: str, needle: str) -> bool:
    return bool(haystack) and bool(needle) and needle.lower() in haystack.lower()


class CompanionMatcher:
    """Scores candidate files against companion signatures."""

    def __init__(self, config: DetectionConfig = DEFAULT_CONFIG) -> None:
        self._weights = config.weights
        self._threshold = config.companion_threshold

    def score(
        self, signature: CompanionSignature, candidate: CandidateFile,
    ) -> tuple[float, tuple[str, ...]]:
        """Score one signature; returns (0.0, ()) without a name match."""
        if not signature.executable_name:
            return 0.0, ()
        if candidate.name.lower() != signature.executable_name.lower():
            return 0.0, ()

        w = self._weights
        score = w.companion_name
        reasons = [
            f"Matched companion signature: {signature.name}",
            f"Executable name: {candidate.name}",
        ]

        meta = candidate.metadata
        if meta is not None:
            hint = signature.meta_name or signature.name
            if signature.match_name and _contains(meta.file_description, hint):
                score += w.companion_description
                reasons.append(f"File description match: {meta.file_description}")
            if signature.match_publisher and _contains(meta.company_name, signature.publisher):
                score += w.companion_publisher
                reasons.append(f"Publisher match: {meta.company_name}")
            if signature.match_version and _contains(meta.product_version, signature.version):
                score += w.companion_version
                reasons.append(f"Version match: {meta.product_version}")

        return clamp_score(score), tuple(reasons)

    def match(
        self,
        candidate: CandidateFile,
        companion_signatures: Sequence[CompanionSignature],
    ) -> CompanionMatch | None:
        """Return the first highest-scoring accepted signature, or None."""
        best: CompanionMatch | None = None
        for signature in companion_signatures:
            score, reasons = self.score(signature, candidate)
            if best is None or score > best.score:
                best = CompanionMatch(signature, score, reasons)
        if best is None or best.score < self._threshold:
            return None
        return best

    def find_companions(
        self,
        game: DetectedGame,
        companion_signatures: Sequence[CompanionSignature],
        path_filter: PathFilter,
        metadata_reader: MetadataReader = read_binary_metadata,
    ) -> tuple[DetectedCompanion, ...]:
        """Detect companions next to a signature-matched game.

        Args:
            game: The identified game (must carry a matched signature).
            companion_signatures: Signatures scoped to the game's signature.
            path_filter: Filter applied to sibling files.
            metadata_reader: Reads binary metadata for each sibling.

        Returns:
            One companion per matching file, in directory order.
        """
        if game.matched_signature is None or not companion_signatures:
            return ()

        game_dir = Path(game.game_working_path)
        search_dirs = [game_dir]
        if game_dir.parent != game_dir:
            search_dirs.append(game_dir.parent)

        wanted = {s.executable_name.lower() for s in companion_signatures if s.executable_name}
        skip = {normalize_path(game.install_path)}
        companions: list[DetectedCompanion] = []
        for directory in search_dirs:
            for path in self._sibling_candidates(directory, path_filter):
                key = normalize_path(path)
                if key in skip or path.name.lower() not in wanted:
                    continue
                skip.add(key)
                candidate = CandidateFile(path=path, metadata=metadata_reader(path))
                found = self.match(candidate, companion_signatures)
                if found is None:
                    continue
                sig = found.signature
                companions.append(DetectedCompanion(
                    name=sig.name,
                    description=sig.description,
                    publisher=sig.publisher,
                    version=sig.version,
                    executable_path=str(path),
                    companion_args=sig.companion_args,
                    matched_signature=sig,
                    confidence_score=found.score,
                    detection_reasons=found.reasons,
                ))
        return tuple(companions)

    @staticmethod
    def _sibling_candidates(directory: Path, path_filter: PathFilter) -> list[Path]:
        """List candidate files at the top level of a directory."""
        try:
            with os.scandir(directory) as it:
                entries = sorted(
                    (e for e in it if e.is_file() and path_filter.is_candidate(e.name)),
                    key=lambda e: e.name.lower(),
                )
        except OSError:
            logger.warning("Cannot list companions in %s", directory)
            return []
        return [Path(e.path) for e in entries]
