"""Collaborator interfaces consumed by the detection engine.

The engine never owns storage. Signatures, the existing library and the
configured search roots are reached through the narrow protocols below;
progress leaves through a plain callable. The ``Static*`` classes are
in-memory implementations used by the CLI and the tests.
"""

from __future__ import annotations

from typing import Callable, Iterable, Protocol, Sequence, runtime_checkable

from gamefinder.core.models import CompanionSignature, GameSignature, ScanProgress

ProgressSink = Callable[[ScanProgress], None]


@runtime_checkable
class SignatureSource(Protocol):
    """Provides game signatures and their companion signatures."""

    def list_game_signatures(self) -> Sequence[GameSignature]: ...

    def list_companion_signatures(
        self, game_signature_id: int,
    ) -> Sequence[CompanionSignature]: ...


@runtime_checkable
class LibrarySource(Protocol):
    """Provides the paths already present in the game library."""

    def list_existing_games(self) -> Sequence[str]: ...

    def list_existing_companions(self) -> Sequence[str]: ...


@runtime_checkable
class SearchPathSource(Protocol):
    """Provides user-configured search roots."""

    def list_configured_roots(self) -> Sequence[str]: ...


class StaticSignatureSource:
    """Signatures held in memory."""

    def __init__(
        self,
        games: Iterable[GameSignature] = (),
        companions: Iterable[CompanionSignature] = (),
    ) -> None:
        self._games = tuple(games)
        self._companions = tuple(companions)

    def list_game_signatures(self) -> Sequence[GameSignature]:
        return self._games

    def list_companion_signatures(
        self, game_signature_id: int,
    ) -> Sequence[CompanionSignature]:
        return tuple(
            c for c in self._companions if c.game_signature_id == game_signature_id
        )


class StaticLibrarySource:
    """A library described by plain path lists."""

    def __init__(
        self, games: Iterable[str] = (), companions: Iterable[str] = (),
    ) -> None:
        self._games = tuple(str(p) for p in games)
        self._companions = tuple(str(p) for p in companions)

    def list_existing_games(self) -> Sequence[str]:
        return self._games

    def list_existing_companions(self) -> Sequence[str]:
        return self._companions


class StaticSearchPathSource:
    """A fixed list of configured search roots."""

    def __init__(self, roots: Iterable[str] = ()) -> None:
        self._roots = tuple(str(r) for r in roots)

    def list_configured_roots(self) -> Sequence[str]:
        return self._roots
