"""Tests for loading signature catalogs from JSON and YAML."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from gamefinder.core.models import CompanionSignature, GameSignature
from gamefinder.exceptions import SignatureFileError
from gamefinder.signatures.loader import (
    SignatureCatalog,
    load_signature_file,
    load_signature_text,
    parse_signatures,
)
from gamefinder.sources import SignatureSource

_YAML_CATALOG = """\
signatures:
  - name: Hades
    shortName: Hades
    executableName: Hades.exe
    publisher: Supergiant Games
    matchName: true
    matchPublisher: true
    companions:
      - name: Mod Launcher
        executableName: Launcher.exe
        matchName: true
  - id: 10
    name: Celeste
    executable_name: Celeste.exe
    match_name: true
companions:
  - gameSignatureId: 10
    name: Level Editor
    executableName: Ahorn.exe
    matchName: true
"""


class TestLoadSignatureFile:
    """File-level loading in both formats."""

    def test_json_list_camel_case(self, tmp_path: Path) -> None:
        path = tmp_path / "signatures.json"
        path.write_text(json.dumps([
            {"name": "Hades", "executableName": "Hades.exe", "matchName": True,
             "gameArgs": "-windowed", "metaName": "Hades"},
        ]))
        catalog = load_signature_file(path)
        assert catalog.games == (GameSignature(
            id=1, name="Hades", executable_name="Hades.exe", match_name=True,
            game_args="-windowed", meta_name="Hades",
        ),)
        assert catalog.companions == ()
        assert catalog.source == str(path)

    def test_json_mapping_envelope(self, tmp_path: Path) -> None:
        path = tmp_path / "signatures.json"
        path.write_text(json.dumps({
            "version": "1.0.0",
            "signatures": [{"name": "Hades", "executableName": "Hades.exe", "matchName": True}],
        }))
        assert [s.name for s in load_signature_file(path).games] == ["Hades"]

    def test_yaml_with_nested_companions(self, tmp_path: Path) -> None:
        path = tmp_path / "signatures.yaml"
        path.write_text(_YAML_CATALOG)
        catalog = load_signature_file(path)

        hades, celeste = catalog.games
        assert celeste.id == 10
        assert hades.id == 11
        assert hades.match_publisher is True
        assert celeste.executable_name == "Celeste.exe"

        assert catalog.list_companion_signatures(11) == (CompanionSignature(
            id=2, game_signature_id=11, name="Mod Launcher",
            executable_name="Launcher.exe", match_name=True,
        ),)
        editor, = catalog.list_companion_signatures(10)
        assert (editor.id, editor.name) == (1, "Level Editor")
        assert catalog.list_companion_signatures(99) == ()

    def test_auto_ids_skip_explicit_ids(self) -> None:
        catalog = load_signature_text(json.dumps([
            {"name": "A", "matchName": True},
            {"id": 1, "name": "B", "matchName": True},
        ]))
        assert [s.id for s in catalog.games] == [2, 1]

    def test_utf8_bom(self, tmp_path: Path) -> None:
        path = tmp_path / "signatures.json"
        path.write_bytes(b"\xef\xbb\xbf" + json.dumps([{"name": "Hades"}]).encode())
        assert load_signature_file(path).games[0].name == "Hades"

    def test_unknown_keys_ignored(self) -> None:
        catalog = load_signature_text(json.dumps([{"name": "Hades", "category": "Action"}]))
        assert catalog.games[0] == GameSignature(id=1, name="Hades")

    def test_numbers_become_strings(self) -> None:
        catalog = load_signature_text("- name: Hades\n  version: 1.38\n")
        assert catalog.games[0].version == "1.38"

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert len(load_signature_file(path)) == 0

    def test_catalog_is_signature_source(self) -> None:
        assert isinstance(SignatureCatalog(), SignatureSource)


class TestMalformedFiles:
    """Every structural problem surfaces as SignatureFileError."""

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(SignatureFileError, match="Cannot read"):
            load_signature_file(tmp_path / "missing.json")

    def test_invalid_yaml(self) -> None:
        with pytest.raises(SignatureFileError, match="not valid JSON or YAML"):
            load_signature_text("signatures: [unclosed")

    def test_scalar_top_level(self) -> None:
        with pytest.raises(SignatureFileError, match="top level"):
            load_signature_text("just a string")

    def test_entry_not_mapping(self) -> None:
        with pytest.raises(SignatureFileError, match="expected a mapping"):
            load_signature_text("[1, 2]")

    def test_bad_flag_type(self) -> None:
        with pytest.raises(SignatureFileError, match="matchName"):
            parse_signatures([{"name": "Hades", "matchName": "maybe"}])

    def test_bad_id_type(self) -> None:
        with pytest.raises(SignatureFileError, match="integer"):
            parse_signatures([{"id": "one", "name": "Hades"}])

    def test_signatures_not_list(self) -> None:
        with pytest.raises(SignatureFileError, match="must be lists"):
            parse_signatures({"signatures": {"name": "Hades"}})

    def test_nested_companions_not_list(self) -> None:
        with pytest.raises(SignatureFileError, match="'companions' must be a list"):
            parse_signatures([{"name": "Hades", "companions": {"name": "x"}}])
