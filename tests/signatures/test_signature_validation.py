"""Tests for signature authoring checks."""

from __future__ import annotations

import pytest

from gamefinder.core.models import GameSignature
from gamefinder.signatures.validation import (
    ValidationLevel,
    contains_unsafe_path_characters,
    validate_signature,
)


def _sig(**overrides) -> GameSignature:
    values = dict(
        id=1, name="Hades", short_name="Hades", executable_name="Hades.exe",
        publisher="Supergiant Games", match_name=True,
    )
    values.update(overrides)
    return GameSignature(**values)


class TestValidateSignature:
    """Errors and warnings for individual fields."""

    def test_clean_signature(self) -> None:
        result = validate_signature(_sig())
        assert result.is_valid
        assert result.warnings == []
        assert result.level is ValidationLevel.SUCCESS

    def test_missing_name_and_executable(self) -> None:
        result = validate_signature(_sig(name="  ", executable_name=""))
        assert "Game name is required" in result.errors
        assert "Executable name is required" in result.errors
        assert result.level is ValidationLevel.ERROR

    def test_unexpected_extension_warns(self) -> None:
        result = validate_signature(_sig(executable_name="Hades.dll"))
        assert result.is_valid
        assert result.warnings == ["Executable name should end with one of: .bat, .cmd, .exe, .sh"]
        assert result.level is ValidationLevel.WARNING

    def test_extension_case_insensitive(self) -> None:
        assert validate_signature(_sig(executable_name="HADES.EXE")).warnings == []

    def test_long_short_name(self) -> None:
        result = validate_signature(_sig(short_name="HadesTheGame"))
        assert result.warnings == ["Short name should be 10 characters or less"]

    def test_no_match_criteria(self) -> None:
        result = validate_signature(_sig(match_name=False))
        assert result.errors == ["At least one match criteria must be enabled"]

    def test_dead_version_and_publisher_flags(self) -> None:
        result = validate_signature(_sig(match_version=True, match_publisher=True, publisher=""))
        assert result.is_valid
        assert result.warnings == [
            "Version matching is enabled but no version is specified",
            "Publisher matching is enabled but no publisher is specified",
        ]

    def test_traversal_in_executable(self) -> None:
        result = validate_signature(_sig(executable_name="..\\Hades.exe"))
        assert "Executable name contains unsafe characters" in result.errors

    def test_unsafe_game_image(self) -> None:
        result = validate_signature(_sig(game_image="../covers/hades.png"))
        assert result.errors == ["Game image path contains unsafe characters"]

    def test_custom_extensions(self) -> None:
        result = validate_signature(_sig(executable_name="hades.x86_64"), extensions=[".x86_64"])
        assert result.warnings == []


class TestUnsafeCharacters:
    @pytest.mark.parametrize("value", ["..", "a/b", "a\\b", "a|b", "<a>", "C:x", "*.exe", "a?", '"a"'])
    def test_unsafe(self, value: str) -> None:
        assert contains_unsafe_path_characters(value)

    @pytest.mark.parametrize("value", ["", "   ", "Hades.exe", "cover.png", "Game Name 2"])
    def test_safe(self, value: str) -> None:
        assert not contains_unsafe_path_characters(value)
