"""Game signature scoring.

Each signature with at least one enabled match flag is scored against the
candidate file:

- **Name** (``match_name`` and ``executable_name`` set): exact,
  case-insensitive file name match, or a weaker substring match. The two
  are mutually exclusive.
- **Publisher** (``match_publisher``, ``publisher`` set, metadata
  available): company name contains the publisher.
- **Product name** (``meta_name`` set, metadata available): product name
  contains the hint. Not gated by a flag.

Version is never scored: game patches change it too often and would turn
valid matches into false negatives.

Across signatures the first one reaching the strictly highest score wins,
and it is accepted only when that score is above the signature threshold.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Sequence

from gamefinder.core.config import DEFAULT_CONFIG, DetectionConfig
from gamefinder.core.models import (
    CandidateFile,
    DetectedGame,
    GameSignature,
    clamp_score,
)


@dataclass(frozen=True)
class SignatureMatch:
    """The accepted signature for a candidate and its score."""

    signature: GameSignature
    score: float


def _contains(haystack: str, needle: str) -> bool:
    return bool(haystack) and needle.lower() in haystack.lower()


class SignatureMatcher:
    """Scores candidate files against known game signatures.

    The matcher is stateless; ``match`` is deterministic for a given
    signature order and candidate metadata.
    """

    def __init__(self, config: DetectionConfig = DEFAULT_CONFIG) -> None:
        self._weights = config.weights
        self._threshold = config.signature_threshold

    def score(self, signature: GameSignature, candidate: CandidateFile) -> float:
        """Compute the confidence that ``candidate`` is ``signature``'s game."""
        if not signature.has_match_criteria:
            return 0.0

        w = self._weights
        file_name = candidate.name
        meta = candidate.metadata
        score = 0.0

        if signature.match_name and signature.executable_name:
            if file_name.lower() == signature.executable_name.lower():
                score += w.name_exact
            elif _contains(file_name, signature.executable_name):
                score += w.name_partial

        if signature.match_publisher and signature.publisher and meta is not None:
            if _contains(meta.company_name, signature.publisher):
                score += w.publisher

        if signature.meta_name and meta is not None:
            if _contains(meta.product_name, signature.meta_name):
                score += w.product_name

        return clamp_score(score)

    def match(
        self,
        candidate: CandidateFile,
        signatures: Sequence[GameSignature],
    ) -> SignatureMatch | None:
        """Return the best accepted signature, or None.

        Args:
            candidate: The file under consideration.
            signatures: Signatures in declaration order.

        Returns:
            The first signature with the highest score, when that score is
            strictly above the threshold.
        """
        best: SignatureMatch | None = None
        for signature in signatures:
            score = self.score(signature, candidate)
            if best is None or score > best.score:
                best = SignatureMatch(signature, score)
        if best is None or best.score <= self._threshold:
            return None
        return best

    @staticmethod
    def apply(game: DetectedGame, match: SignatureMatch) -> DetectedGame:
        """Copy signature identity onto a detection and record the reason."""
        sig = match.signature
        return replace(
            game,
            name=sig.name,
            short_name=sig.short_name,
            description=sig.description,
            publisher=sig.publisher,
            version=sig.version,
            game_args=sig.game_args,
            game_image=sig.game_image,
            theme_name=sig.theme_name,
            matched_signature=sig,
            confidence_score=match.score,
            detection_reasons=game.detection_reasons + (f"Matched signature: {sig.name}",),
        )
