"""Download signature files over HTTP.

Wraps ``httpx.AsyncClient`` with a fixed timeout and user agent. Both raw
signature files and GitHub contents-API responses are accepted; the latter
wrap the file in a JSON envelope with base64-encoded ``content``.

``httpx`` is an optional dependency (the ``remote`` extra) and is imported
lazily so the rest of the package works without it.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
from typing import Any

from gamefinder.exceptions import SignatureFetchError

logger = logging.getLogger(__name__)

# Timeout for signature downloads (seconds).
DEFAULT_TIMEOUT: float = 30.0

USER_AGENT: str = "gamefinder-signatures/0.1"


def _ensure_httpx() -> Any:  # noqa: ANN401
    """Lazily import httpx and raise a friendly error if missing.

    Returns:
        The ``httpx`` module.

    Raises:
        SignatureFetchError: If httpx is not installed.
    """
    try:
        import httpx

        return httpx
    except ImportError:
        raise SignatureFetchError(
            "httpx is required to fetch signatures.\n"
            "Install it with: pip install gamefinder[remote]"
        ) from None


def unwrap_contents_envelope(body: str) -> str:
    """Return the file text from a GitHub contents-API response.

    Bodies that are not such an envelope are returned unchanged.

    Raises:
        SignatureFetchError: If the envelope's content cannot be decoded.
    """
    try:
        payload = json.loads(body)
    except ValueError:
        return body
    if not isinstance(payload, dict) or "content" not in payload:
        return body
    if payload.get("encoding", "base64") != "base64":
        raise SignatureFetchError(f"Unsupported content encoding: {payload['encoding']}")
    try:
        return base64.b64decode(str(payload["content"])).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as exc:
        raise SignatureFetchError(f"Cannot decode envelope content: {exc}") from exc


async def fetch_signatures(url: str, *, timeout: float = DEFAULT_TIMEOUT) -> str:
    """Download a signature file and return its text.

    Args:
        url: Raw file URL or GitHub contents-API URL.
        timeout: Request timeout in seconds.

    Returns:
        The signature file contents.

    Raises:
        SignatureFetchError: On timeouts, HTTP errors or undecodable content.
    """
    httpx = _ensure_httpx()
    try:
        async with httpx.AsyncClient(
            timeout=timeout,
            headers={"User-Agent": USER_AGENT},
            follow_redirects=True,
        ) as client:
            resp = await client.get(url)
            resp.raise_for_status()
            body = resp.text
    except httpx.TimeoutException as exc:
        logger.warning("Timeout fetching %s", url)
        raise SignatureFetchError(f"Timed out fetching {url}") from exc
    except httpx.HTTPStatusError as exc:
        logger.warning("HTTP %d from %s", exc.response.status_code, url)
        raise SignatureFetchError(
            f"HTTP {exc.response.status_code} fetching {url}"
        ) from exc
    except httpx.RequestError as exc:
        logger.warning("Request error for %s: %s", url, exc)
        raise SignatureFetchError(f"Request to {url} failed: {exc}") from exc

    return unwrap_contents_envelope(body)
