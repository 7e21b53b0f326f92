"""
Settings and configuration for ocistore.

Centralizes configuration values and provides validation with fail-fast behavior.
Settings are built from the store configuration map handed over by the host,
or from environment variables for command-line use.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional

from .storage.location import ParsedLocation, parse_location
from .storage.oci_errors import OciConfigError
from .storage.registry_http import USER_AGENT

__all__ = [
    "Settings",
    "config_from_env",
    "create_settings_from_config",
    "create_settings_from_env",
]


@dataclass(frozen=True)
class Settings:
    """
    Configuration settings for an OCI store.

    Registry Settings:
        location: Store location, ``oci://host[:port]/<repo>`` (required)
        use_tls: Talk HTTPS to the registry instead of HTTP
        tls_verify: Verify the registry's TLS certificate
        http_timeout_s: HTTP request timeout in seconds (None = no timeout,
            transfers may be arbitrarily large and slow)
        user_agent: User-Agent header sent with every request
    """
    location: str
    use_tls: bool = False
    tls_verify: bool = False
    http_timeout_s: Optional[float] = None
    user_agent: str = USER_AGENT
    parsed: ParsedLocation = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        """Validate settings on construction."""
        # Raises OciConfigError for malformed locations or a missing repo
        object.__setattr__(self, "parsed", parse_location(self.location))

        if self.http_timeout_s is not None and self.http_timeout_s <= 0:
            raise OciConfigError(f"http_timeout_s must be positive, got {self.http_timeout_s}")

    @property
    def registry_url(self) -> str:
        """Registry origin (scheme + host + port)."""
        return self.parsed.origin(self.use_tls)

    @property
    def repository(self) -> str:
        return self.parsed.repository


def _str_to_bool(value: str) -> bool:
    return value.strip().lower() in ("true", "1", "yes", "on")


def _get_timeout(value: Optional[str]) -> Optional[float]:
    if not value:
        return None
    try:
        return float(value)
    except ValueError as e:
        raise OciConfigError(f"Invalid timeout {value!r}") from e


def create_settings_from_config(config: Mapping[str, str]) -> Settings:
    """
    Build settings from a store configuration map.

    Keys:
        - location (required)
        - tls (default: false)
        - tls_verify (default: false)
        - timeout (seconds, default: none)

    Raises:
        OciConfigError: If configuration is invalid or location is missing
    """
    location = config.get("location")
    if not location:
        raise OciConfigError("location is required")

    return Settings(
        location=location,
        use_tls=_str_to_bool(config.get("tls", "false")),
        tls_verify=_str_to_bool(config.get("tls_verify", "false")),
        http_timeout_s=_get_timeout(config.get("timeout")),
    )


def config_from_env() -> Dict[str, str]:
    """
    Read a store configuration map from environment variables.

    Environment Variables:
        - OCISTORE_LOCATION (required)
        - OCISTORE_TLS (default: false)
        - OCISTORE_TLS_VERIFY (default: false)
        - OCISTORE_HTTP_TIMEOUT (default: none)

    Raises:
        OciConfigError: If OCISTORE_LOCATION is not set
    """
    location = os.getenv("OCISTORE_LOCATION")
    if not location:
        raise OciConfigError("OCISTORE_LOCATION environment variable is required")

    return {
        "location": location,
        "tls": os.getenv("OCISTORE_TLS", "false"),
        "tls_verify": os.getenv("OCISTORE_TLS_VERIFY", "false"),
        "timeout": os.getenv("OCISTORE_HTTP_TIMEOUT", ""),
    }


def create_settings_from_env() -> Settings:
    """
    Load settings from environment variables (see config_from_env).

    Note:
        Creates a fresh Settings instance every time (no caching).
    """
    return create_settings_from_config(config_from_env())
