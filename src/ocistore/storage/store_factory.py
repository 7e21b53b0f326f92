"""
Store factory with scheme-based registration.

Hosts open stores from a configuration map whose ``location`` names the
backend by scheme. Backends register a factory for their scheme here; the
OCI store registers itself as ``oci``.
"""
from __future__ import annotations

from typing import Any, Callable, Dict, Mapping

from .base import Store
from .oci_errors import OciConfigError
from .oci_store import STORE_TYPE, OciStore

StoreFactory = Callable[..., Store]

_FACTORIES: Dict[str, StoreFactory] = {}


def register(scheme: str, factory: StoreFactory) -> None:
    """
    Register a store factory for a location scheme.

    Factories take the configuration map plus any keyword arguments passed
    to open_store().

    Raises:
        ValueError: If the scheme is already registered
    """
    if scheme in _FACTORIES:
        raise ValueError(f"Store scheme already registered: {scheme}")
    _FACTORIES[scheme] = factory


def schemes() -> list:
    return sorted(_FACTORIES)


def open_store(config: Mapping[str, str], **kwargs: Any) -> Store:
    """
    Create a store for the scheme named by ``config["location"]``.

    Locations without a scheme are treated as ``oci``.

    Examples:
        >>> store = open_store({"location": "oci://localhost:5000/demo"})

    Raises:
        OciConfigError: If the location is missing or the scheme is unknown
    """
    location = config.get("location")
    if not location:
        raise OciConfigError("location is required")

    scheme = location.split("://", 1)[0] if "://" in location else STORE_TYPE
    factory = _FACTORIES.get(scheme)
    if factory is None:
        raise OciConfigError(
            f"Unknown store scheme: {scheme}. Supported values: {', '.join(schemes())}"
        )
    return factory(config, **kwargs)


register(STORE_TYPE, OciStore.from_config)


__all__ = ["register", "schemes", "open_store", "StoreFactory"]
