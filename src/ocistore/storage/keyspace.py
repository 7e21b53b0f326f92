"""
Tag key-space for stored objects.

Tags in the repository fall into two disjoint branches:

- the reserved literal ``CONFIG`` tag holding the store configuration, and
- resource tags ``<prefix><hex key>`` where the prefix names the resource
  category and the key is a 32-byte content key in lowercase hex.

Decoding only ever accepts the second branch, so the reserved tag can never be
mistaken for a content key.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from .oci_errors import UnsupportedOperation

CONFIG_TAG = "CONFIG"
KEY_SIZE = 32


class StorageResource(str, Enum):
    """Resource categories a store partitions its objects into."""
    PACKFILE = "packfile"
    STATE = "state"
    LOCK = "lock"


RESOURCE_PREFIXES = {
    StorageResource.PACKFILE: "packfiles-",
    StorageResource.STATE: "state-",
    StorageResource.LOCK: "locks-",
}


def prefix_for(resource: Any) -> str:
    """
    Return the tag prefix of a resource category.

    Raises:
        UnsupportedOperation: If the category has no prefix
    """
    if not isinstance(resource, StorageResource) or resource not in RESOURCE_PREFIXES:
        raise UnsupportedOperation(f"unsupported resource: {resource!r}")
    return RESOURCE_PREFIXES[resource]


def check_key(key: bytes) -> bytes:
    """Validate a content key, returning it as bytes."""
    if not isinstance(key, (bytes, bytearray)):
        raise TypeError(f"key must be bytes, got {type(key).__name__}")
    if len(key) != KEY_SIZE:
        raise ValueError(f"key must be {KEY_SIZE} bytes, got {len(key)}")
    return bytes(key)


def resource_tag(prefix: str, key: bytes) -> str:
    """Build the tag naming ``key`` under a resource prefix."""
    return f"{prefix}{check_key(key).hex()}"


def config_tag() -> str:
    """Tag holding the store configuration."""
    return CONFIG_TAG


def key_from_tag(prefix: str, tag: str) -> Optional[bytes]:
    """
    Decode a resource tag back into its content key.

    Returns:
        The 32-byte key, or None if the tag does not belong to ``prefix`` or
        its remainder is not the hex form of a 32-byte key
    """
    if tag == CONFIG_TAG or not tag.startswith(prefix):
        return None
    try:
        key = bytes.fromhex(tag[len(prefix):])
    except ValueError:
        return None
    if len(key) != KEY_SIZE:
        return None
    return key


__all__ = [
    "CONFIG_TAG",
    "KEY_SIZE",
    "StorageResource",
    "RESOURCE_PREFIXES",
    "prefix_for",
    "check_key",
    "resource_tag",
    "config_tag",
    "key_from_tag",
]
