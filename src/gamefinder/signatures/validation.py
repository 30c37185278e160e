"""Authoring checks for game signatures.

Errors make a signature unusable (it could never match, or it carries a
path that could escape its directory). Warnings flag signatures that will
load but probably do not do what their author intended.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable

from gamefinder.core.config import EXECUTABLE_EXTENSIONS
from gamefinder.core.heuristics import SHORT_NAME_MAX
from gamefinder.core.models import GameSignature

UNSAFE_PATH_TOKENS: tuple[str, ...] = ("..", "/", "\\", "|", "<", ">", ":", "*", "?", '"')


class ValidationLevel(Enum):
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@dataclass
class ValidationResult:
    """Outcome of validating one signature."""

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def level(self) -> ValidationLevel:
        if self.errors:
            return ValidationLevel.ERROR
        if self.warnings:
            return ValidationLevel.WARNING
        return ValidationLevel.SUCCESS


def contains_unsafe_path_characters(value: str) -> bool:
    """True when ``value`` holds traversal or reserved path characters."""
    return bool(value.strip()) and any(token in value for token in UNSAFE_PATH_TOKENS)


def validate_signature(
    signature: GameSignature,
    extensions: Iterable[str] = EXECUTABLE_EXTENSIONS,
) -> ValidationResult:
    """Check a signature for missing fields, unsafe paths and dead flags.

    Args:
        signature: The signature to check.
        extensions: Extensions the scanner treats as executables.

    Returns:
        Collected errors and warnings.
    """
    result = ValidationResult()

    if not signature.name.strip():
        result.errors.append("Game name is required")
    if not signature.executable_name.strip():
        result.errors.append("Executable name is required")
    elif os.path.splitext(signature.executable_name)[1].lower() not in set(extensions):
        result.warnings.append(
            f"Executable name should end with one of: {', '.join(sorted(extensions))}"
        )

    if signature.short_name and len(signature.short_name) > SHORT_NAME_MAX:
        result.warnings.append(f"Short name should be {SHORT_NAME_MAX} characters or less")

    if not signature.has_match_criteria:
        result.errors.append("At least one match criteria must be enabled")
    if signature.match_version and not signature.version.strip():
        result.warnings.append("Version matching is enabled but no version is specified")
    if signature.match_publisher and not signature.publisher.strip():
        result.warnings.append("Publisher matching is enabled but no publisher is specified")

    if contains_unsafe_path_characters(signature.executable_name):
        result.errors.append("Executable name contains unsafe characters")
    if contains_unsafe_path_characters(signature.game_image):
        result.errors.append("Game image path contains unsafe characters")

    return result
