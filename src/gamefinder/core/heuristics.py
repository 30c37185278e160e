"""Heuristic identification for executables that match no signature.

Confidence is built additively from the file name, the binary's version
resource and the name of the containing directory, then capped at 1.0:

    filename (always) ........... 0.30
    product name ................ 0.40  (overrides the filename name)
    company name ................ 0.10  (publisher)
    product version ............. 0.10  (version)
    file description ............ 0.10  (description)
    game-like directory ......... 0.20

A detection is produced only when the total reaches the heuristic
threshold.
"""

from __future__ import annotations

import re

from gamefinder.core.config import DEFAULT_CONFIG, DetectionConfig
from gamefinder.core.models import CandidateFile, DetectedGame, clamp_score

# Applied in order; each result is stripped before the next pattern runs.
_NAME_CLEANUP_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\s*\(.*\)$", re.IGNORECASE),
    re.compile(r"\s*\[.*\]$", re.IGNORECASE),
    re.compile(r"\s*-\s*\d+(\.\d+)*$", re.IGNORECASE),
    re.compile(r"^Game\s+", re.IGNORECASE),
    re.compile(r"\s+Game$", re.IGNORECASE),
)

_WORD_SPLIT = re.compile(r"[ \-_]+")

SHORT_NAME_MAX = 10


def clean_game_name(name: str) -> str:
    """Strip decorations such as ``(x64)``, ``[GOG]`` and ``- 1.0.2``.

    Returns the original name when cleaning would leave nothing.
    """
    cleaned = name
    for pattern in _NAME_CLEANUP_PATTERNS:
        cleaned = pattern.sub("", cleaned).strip()
    return cleaned if cleaned.strip() else name


def generate_short_name(name: str) -> str:
    """Single words are truncated; multi-word names become initials."""
    words = [w for w in _WORD_SPLIT.split(name) if w]
    if not words:
        return name
    if len(words) == 1:
        return words[0][:SHORT_NAME_MAX]
    return "".join(w[0] for w in words)[:SHORT_NAME_MAX]


class HeuristicIdentifier:
    """Derives a best-effort game identity from file name and metadata."""

    def __init__(self, config: DetectionConfig = DEFAULT_CONFIG) -> None:
        self._weights = config.weights
        self._threshold = config.heuristic_threshold
        self._keywords = tuple(k.lower() for k in config.game_directory_keywords)

    def is_likely_game_directory(self, directory_name: str) -> bool:
        lower = directory_name.lower()
        return bool(lower) and any(k in lower for k in self._keywords)

    def identify(self, candidate: CandidateFile) -> DetectedGame | None:
        """Build a heuristic detection, or None below the threshold."""
        w = self._weights
        reasons: list[str] = []

        name = clean_game_name(candidate.path.stem)
        short_name = generate_short_name(name)
        publisher = version = description = ""
        reasons.append("Name extracted from filename")
        score = w.heuristic_filename

        meta = candidate.metadata
        if meta is not None:
            if meta.product_name:
                name = clean_game_name(meta.product_name)
                reasons.append("Name from file version info")
                score += w.heuristic_product_name
            if meta.company_name:
                publisher = meta.company_name
                reasons.append("Publisher from file version info")
                score += w.heuristic_company
            if meta.product_version:
                version = meta.product_version
                reasons.append("Version from file version info")
                score += w.heuristic_version
            if meta.file_description:
                description = meta.file_description
                reasons.append("Description from file version info")
                score += w.heuristic_description

        if self.is_likely_game_directory(candidate.directory.name):
            reasons.append("Located in game-like directory")
            score += w.heuristic_directory

        score = clamp_score(score)
        if not name or score < self._threshold:
            return None

        return DetectedGame(
            name=name,
            short_name=short_name,
            description=description,
            publisher=publisher,
            version=version,
            install_path=str(candidate.path),
            game_working_path=str(candidate.directory),
            executable_name=candidate.name,
            confidence_score=score,
            detection_reasons=tuple(reasons),
        )
