"""Signature catalog tooling: load, validate and fetch signature files.

Public API::

    from gamefinder.signatures import load_signature_file, validate_signature

    catalog = load_signature_file("signatures.yaml")
    for sig in catalog.games:
        print(sig.name, validate_signature(sig).level.name)
"""

from __future__ import annotations

from gamefinder.signatures.loader import (
    SignatureCatalog,
    load_signature_file,
    load_signature_text,
    parse_signatures,
)
from gamefinder.signatures.remote import fetch_signatures, unwrap_contents_envelope
from gamefinder.signatures.validation import (
    ValidationLevel,
    ValidationResult,
    validate_signature,
)

__all__ = [
    "SignatureCatalog",
    "ValidationLevel",
    "ValidationResult",
    "fetch_signatures",
    "load_signature_file",
    "load_signature_text",
    "parse_signatures",
    "unwrap_contents_envelope",
    "validate_signature",
]
