"""Signature catalog loading from JSON or YAML files.

A signature file is either a bare list of game signatures or a mapping::

    signatures:
      - name: Hades
        executableName: Hades.exe
        matchName: true
        companions:
          - name: Hades Mod Manager
            executableName: modimporter.exe
    companions:
      - gameSignatureId: 1
        name: Overlay
        executableName: overlay.exe

Keys may be camelCase (as exported by the desktop app) or snake_case.
Missing ids are assigned in file order starting at 1. Text that is not
valid JSON is parsed with ``yaml.safe_load``.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Iterable, Sequence

import yaml

from gamefinder.core.models import CompanionSignature, GameSignature
from gamefinder.exceptions import SignatureFileError

logger = logging.getLogger(__name__)

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")

_GAME_FIELDS = frozenset(f.name for f in fields(GameSignature))
_COMPANION_FIELDS = frozenset(f.name for f in fields(CompanionSignature))
_BOOL_FIELDS = frozenset({"match_name", "match_version", "match_publisher"})
_INT_FIELDS = frozenset({"id", "game_signature_id"})


def _snake(key: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", key).lower()


@dataclass(frozen=True)
class SignatureCatalog:
    """Signatures loaded from a file. Satisfies ``SignatureSource``."""

    games: tuple[GameSignature, ...] = ()
    companions: tuple[CompanionSignature, ...] = ()
    source: str = ""
    _by_game: dict[int, tuple[CompanionSignature, ...]] = field(
        init=False, repr=False, compare=False,
    )

    def __post_init__(self) -> None:
        grouped: dict[int, list[CompanionSignature]] = {}
        for companion in self.companions:
            grouped.setdefault(companion.game_signature_id, []).append(companion)
        object.__setattr__(self, "_by_game", {k: tuple(v) for k, v in grouped.items()})

    def list_game_signatures(self) -> Sequence[GameSignature]:
        return self.games

    def list_companion_signatures(
        self, game_signature_id: int,
    ) -> Sequence[CompanionSignature]:
        return self._by_game.get(game_signature_id, ())

    def __len__(self) -> int:
        return len(self.games)


def _coerce(raw: Any, allowed: frozenset[str], where: str) -> dict[str, Any]:
    """Normalise one entry's keys and value types for a dataclass."""
    if not isinstance(raw, dict):
        raise SignatureFileError(f"{where}: expected a mapping, got {type(raw).__name__}")
    values: dict[str, Any] = {}
    for key, value in raw.items():
        name = _snake(str(key))
        if name not in allowed:
            continue
        if value is None:
            continue
        if name in _BOOL_FIELDS:
            if not isinstance(value, bool):
                raise SignatureFileError(f"{where}: '{key}' must be true or false")
        elif name in _INT_FIELDS:
            if isinstance(value, bool) or not isinstance(value, int):
                raise SignatureFileError(f"{where}: '{key}' must be an integer")
        else:
            value = str(value)
        values[name] = value
    return values


def parse_signatures(data: Any, source: str = "<data>") -> SignatureCatalog:
    """Build a catalog from already-parsed JSON/YAML data.

    Raises:
        SignatureFileError: If the structure is not a signature file.
    """
    if data is None:
        return SignatureCatalog(source=source)
    if isinstance(data, list):
        raw_games: Any = data
        raw_companions: Any = []
    elif isinstance(data, dict):
        raw_games = data.get("signatures") or []
        raw_companions = data.get("companions") or []
    else:
        raise SignatureFileError(f"{source}: top level must be a list or a mapping")
    if not isinstance(raw_games, list) or not isinstance(raw_companions, list):
        raise SignatureFileError(f"{source}: 'signatures' and 'companions' must be lists")

    games: list[GameSignature] = []
    companions: list[CompanionSignature] = []
    nested: list[tuple[int, Iterable[Any], str]] = []

    coerced = [
        _coerce(raw, _GAME_FIELDS, f"{source}: signature #{index + 1}")
        for index, raw in enumerate(raw_games)
    ]
    used_ids = {v["id"] for v in coerced if v.get("id")}
    for index, (raw, values) in enumerate(zip(raw_games, coerced)):
        where = f"{source}: signature #{index + 1}"
        if not values.get("id"):
            values["id"] = max(used_ids, default=0) + 1
            used_ids.add(values["id"])
        sig_id = values["id"]
        games.append(GameSignature(**values))
        children = raw.get("companions")
        if children:
            if not isinstance(children, list):
                raise SignatureFileError(f"{where}: 'companions' must be a list")
            nested.append((sig_id, children, where))

    for index, raw in enumerate(raw_companions):
        values = _coerce(raw, _COMPANION_FIELDS, f"{source}: companion #{index + 1}")
        companions.append(CompanionSignature(**values))
    for sig_id, children, where in nested:
        for index, raw in enumerate(children):
            values = _coerce(raw, _COMPANION_FIELDS, f"{where} companion #{index + 1}")
            values["game_signature_id"] = sig_id
            companions.append(CompanionSignature(**values))

    taken = {c.id for c in companions if c.id}
    numbered: list[CompanionSignature] = []
    for companion in companions:
        if not companion.id:
            companion = replace(companion, id=max(taken, default=0) + 1)
            taken.add(companion.id)
        numbered.append(companion)
    logger.debug(
        "Loaded %d game and %d companion signatures from %s",
        len(games), len(numbered), source,
    )
    return SignatureCatalog(games=tuple(games), companions=tuple(numbered), source=source)


def load_signature_text(text: str, source: str = "<text>") -> SignatureCatalog:
    """Parse signature file contents (JSON or YAML)."""
    try:
        return parse_signatures(json.loads(text), source)
    except json.JSONDecodeError:
        logger.debug("%s is not JSON, trying YAML", source)
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise SignatureFileError(f"{source}: not valid JSON or YAML: {exc}") from exc
    return parse_signatures(data, source)


def load_signature_file(path: str | Path) -> SignatureCatalog:
    """Load a signature catalog from a JSON or YAML file.

    Args:
        path: Path to the file.

    Returns:
        The loaded catalog.

    Raises:
        SignatureFileError: If the file is missing, unreadable or malformed.
    """
    file_path = Path(path)
    try:
        text = file_path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as exc:
        raise SignatureFileError(f"Cannot read signature file {file_path}: {exc}") from exc
    return load_signature_text(text, str(file_path))
