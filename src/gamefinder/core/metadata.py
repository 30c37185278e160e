"""Binary version-resource metadata for Windows PE executables.

Reads the ``StringFileInfo`` block (ProductName, CompanyName,
ProductVersion, FileVersion, FileDescription) with ``pefile``. Anything
that is not a readable PE image yields ``None``: scripts (``.sh``,
``.bat``, ``.cmd``), truncated files, permission failures. Absence of
metadata simply withholds the metadata-based scoring contributions.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

import pefile

from gamefinder.core.models import BinaryMetadata

logger = logging.getLogger(__name__)

MetadataReader = Callable[[Path], BinaryMetadata | None]

# Extensions that can carry a PE version resource.
_PE_EXTENSIONS: frozenset[str] = frozenset({".exe", ".dll"})

_FIELD_KEYS: dict[str, str] = {
    "ProductName": "product_name",
    "CompanyName": "company_name",
    "ProductVersion": "product_version",
    "FileVersion": "file_version",
    "FileDescription": "file_description",
}


def _decode(value: bytes | str) -> str:
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="replace")
    return value.replace("\x00", "").strip()


def _string_table_entries(pe: pefile.PE) -> dict[str, str]:
    """Flatten every StringFileInfo string table into one mapping."""
    entries: dict[str, str] = {}
    for file_info in getattr(pe, "FileInfo", None) or []:
        # pefile returns a list of lists since 2018; older layouts are flat.
        items = file_info if isinstance(file_info, list) else [file_info]
        for item in items:
            if _decode(getattr(item, "Key", b"")) != "StringFileInfo":
                continue
            for table in getattr(item, "StringTable", []):
                for key, value in table.entries.items():
                    entries.setdefault(_decode(key), _decode(value))
    return entries


def read_binary_metadata(path: Path) -> BinaryMetadata | None:
    """Read version-resource strings from an executable.

    Args:
        path: Path to the executable.

    Returns:
        A ``BinaryMetadata`` when the file is a PE image with a version
        resource, otherwise ``None``.
    """
    if path.suffix.lower() not in _PE_EXTENSIONS:
        return None
    try:
        pe = pefile.PE(str(path), fast_load=True)
    except (pefile.PEFormatError, OSError, ValueError) as exc:
        logger.debug("No PE metadata for %s: %s", path, exc)
        return None

    try:
        pe.parse_data_directories(
            directories=[pefile.DIRECTORY_ENTRY["IMAGE_DIRECTORY_ENTRY_RESOURCE"]]
        )
        entries = _string_table_entries(pe)
    except (pefile.PEFormatError, AttributeError, ValueError) as exc:
        logger.debug("Malformed version resource in %s: %s", path, exc)
        return None
    finally:
        pe.close()

    if not entries:
        return None
    return BinaryMetadata(**{
        attr: entries.get(key, "") for key, attr in _FIELD_KEYS.items()
    })
