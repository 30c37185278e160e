"""gamefinder exception hierarchy.

All public exceptions inherit from GameFinderError, giving callers a single
base class to catch when they want to handle any gamefinder-specific failure
without swallowing unrelated errors.

Scanning itself never raises for filesystem problems: access errors and
per-file failures are recorded on the ``ScanResult`` instead. The exceptions
below cover misuse of the API and the signature catalog tooling.
"""


class GameFinderError(Exception):
    """Base exception for all gamefinder errors."""


class SignatureFileError(GameFinderError):
    """Raised when a signature file cannot be read or parsed.

    Covers missing files, malformed JSON/YAML, and entries whose fields
    have the wrong shape (e.g. a list where a mapping is expected).
    """


class SignatureFetchError(GameFinderError):
    """Raised when a remote signature file cannot be downloaded.

    Covers timeouts, non-2xx responses, and envelopes whose content
    cannot be decoded.
    """


class ScanInProgressError(GameFinderError):
    """Raised when ``DirectoryScanner.scan`` is re-entered mid-scan."""
