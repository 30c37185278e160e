"""Scan candidate filter: extension allow-list plus exclude globs.

Exclude patterns use ``*`` as the only wildcard and are anchored to the
whole file name, case-insensitively. They are compiled once per filter so
``is_candidate`` stays a cheap, pure function of the path string.
"""

from __future__ import annotations

import os
import re
from pathlib import Path

from gamefinder.core.config import DEFAULT_CONFIG, DetectionConfig


def compile_glob(pattern: str) -> re.Pattern[str]:
    """Compile a ``*``-only glob into an anchored, case-insensitive regex."""
    body = ".*".join(re.escape(part) for part in pattern.split("*"))
    return re.compile(f"^{body}$", re.IGNORECASE | re.DOTALL)


class PathFilter:
    """Decides whether a file is a scan candidate.

    Usage::

        path_filter = PathFilter()
        path_filter.is_candidate("C:/Games/Doom/doom.exe")     # True
        path_filter.is_candidate("C:/Games/Doom/unins000.exe")  # False
    """

    def __init__(self, config: DetectionConfig = DEFAULT_CONFIG) -> None:
        self._extensions = frozenset(ext.lower() for ext in config.executable_extensions)
        self._excludes: tuple[re.Pattern[str], ...] = tuple(
            compile_glob(p) for p in config.exclude_patterns
        )

    def has_executable_extension(self, path: str | Path) -> bool:
        return os.path.splitext(str(path))[1].lower() in self._extensions

    def is_excluded(self, path: str | Path) -> bool:
        """True when the file name matches any exclude pattern."""
        name = os.path.basename(str(path))
        return any(pat.match(name) for pat in self._excludes)

    def is_candidate(self, path: str | Path) -> bool:
        """True for allow-listed extensions that are not excluded."""
        return self.has_executable_extension(path) and not self.is_excluded(path)
