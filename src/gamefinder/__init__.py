"""gamefinder: Game detection and signature matching for local game libraries."""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"
