"""
Store location parsing.

Parses ``oci://host[:port]/<repo>`` locations into the registry origin and
repository path used by the HTTP layer.
"""
from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import urlsplit

from .oci_errors import OciConfigError

__all__ = ["ParsedLocation", "parse_location", "LOCATION_SCHEME"]

LOCATION_SCHEME = "oci"


@dataclass(frozen=True)
class ParsedLocation:
    """
    Parsed components of a store location.

    Attributes:
        netloc: Registry host with optional port (e.g. "localhost:5000")
        repository: Repository path inside the registry (e.g. "team/backups")
        original: Original location string for error messages
    """
    netloc: str
    repository: str
    original: str

    def origin(self, use_tls: bool = False) -> str:
        """Registry origin (scheme + host + port) without trailing slash."""
        scheme = "https" if use_tls else "http"
        return f"{scheme}://{self.netloc}"

    def as_location(self) -> str:
        return f"{LOCATION_SCHEME}://{self.netloc}/{self.repository}"


def parse_location(location: str) -> ParsedLocation:
    """
    Parse and validate a store location.

    The ``oci://`` prefix is optional; a bare ``host[:port]/repo`` is accepted.
    Leading and trailing slashes around the repository are ignored.

    Args:
        location: Store location string

    Returns:
        ParsedLocation with validated components

    Raises:
        OciConfigError: If the location is empty, has no host, has a foreign
            scheme, or names no repository

    Examples:
        >>> parse_location("oci://localhost:5000/demo")
        ParsedLocation(netloc='localhost:5000', repository='demo', original='...')
    """
    if not location:
        raise OciConfigError("location cannot be empty")

    remainder = location
    if "://" in location:
        scheme, remainder = location.split("://", 1)
        if scheme != LOCATION_SCHEME:
            raise OciConfigError(f"Unsupported location scheme '{scheme}': {location}")

    try:
        parts = urlsplit(f"//{remainder}")
        # Accessing port validates it
        parts.port
    except ValueError as e:
        raise OciConfigError(f"Invalid location {location}: {e}") from e

    if not parts.hostname:
        raise OciConfigError(f"Location is missing a registry host: {location}")

    repository = parts.path.strip("/")
    if not repository:
        raise OciConfigError(f"need a repo: {location}")

    return ParsedLocation(netloc=parts.netloc, repository=repository, original=location)
