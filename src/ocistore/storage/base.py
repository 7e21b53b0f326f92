"""
Storage interfaces for ocistore.

These protocols define the boundary between a host runtime and a store
implementation, enabling clean dependency injection and testing with fakes.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Flag
from typing import BinaryIO, Iterable, List, Optional, Protocol, Union, runtime_checkable

from .keyspace import StorageResource


class Mode(Flag):
    """Access modes a store supports."""
    READ = 1
    WRITE = 2


@dataclass(frozen=True)
class ByteRange:
    """
    Byte range of a stored object.

    Invariants:
    - offset: first byte to return (>= 0)
    - length: number of bytes to return (> 0)
    """
    offset: int
    length: int

    def __post_init__(self):
        if self.offset < 0:
            raise ValueError(f"offset must be non-negative, got {self.offset}")
        if self.length <= 0:
            raise ValueError(f"length must be positive, got {self.length}")

    @property
    def end(self) -> int:
        """Last byte of the range (inclusive)."""
        return self.offset + self.length - 1

    def header_value(self) -> str:
        return f"bytes={self.offset}-{self.end}"


__all__ = ["Mode", "ByteRange", "Store"]


@runtime_checkable
class Store(Protocol):
    """Protocol for content-addressed object stores."""

    def create(self, config: bytes) -> None:
        """Initialize the store and persist its configuration."""
        ...

    def open(self) -> bytes:
        """Return the configuration persisted by create()."""
        ...

    @property
    def location(self) -> str:
        ...

    @property
    def type(self) -> str:
        """Scheme the store was registered under."""
        ...

    @property
    def origin(self) -> str:
        ...

    @property
    def root(self) -> str:
        ...

    def mode(self) -> Mode:
        ...

    def size(self) -> int:
        """Total stored bytes, or -1 if unknown."""
        ...

    def ping(self) -> None:
        """Check connectivity; raises on failure."""
        ...

    def close(self) -> None:
        ...

    def list(self, resource: StorageResource) -> List[bytes]:
        """
        List the keys stored under a resource category.

        Raises:
            UnsupportedOperation: If the category is not supported
        """
        ...

    def put(self, resource: StorageResource, key: bytes,
            data: Union[bytes, BinaryIO, Iterable[bytes]]) -> int:
        """
        Store an object and return its size in bytes.

        Raises:
            UnsupportedOperation: If the category is not supported
        """
        ...

    def get(self, resource: StorageResource, key: bytes,
            rng: Optional[ByteRange] = None):
        """
        Open an object for reading, optionally restricted to a byte range.

        Returns:
            Readable stream the caller must close

        Raises:
            UnsupportedOperation: If the category is not supported
        """
        ...

    def delete(self, resource: StorageResource, key: bytes) -> None:
        """
        Delete an object.

        Raises:
            UnsupportedOperation: If the category is not supported
        """
        ...
