"""
CLI Context for managing application dependencies.

Provides a clean way to manage CLI-level dependencies like the store
configuration and the store instance, avoiding global state and enabling
proper dependency injection.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

import httpx

from .settings import config_from_env
from .storage.base import Store
from .storage.store_factory import open_store


@dataclass
class CLIContext:
    """
    Shared context for CLI commands.

    Manages application-level dependencies (configuration, store) that are
    initialized once and shared across a CLI command execution. The store is
    opened through the scheme registry, the same way a host runtime opens it.
    """
    config: Mapping[str, str]
    transport: Optional[httpx.BaseTransport] = None
    _store: Optional[Store] = None

    @classmethod
    def from_env(cls, transport: Optional[httpx.BaseTransport] = None) -> CLIContext:
        """
        Create CLI context from environment variables.

        Returns:
            CLIContext with configuration loaded from environment
        """
        return cls(config=config_from_env(), transport=transport)

    @property
    def store(self) -> Store:
        """
        Get or create the store instance (lazy initialization).

        Returns:
            Store opened for the configured location
        """
        if self._store is None:
            self._store = open_store(self.config, transport=self.transport)
        return self._store

    def close(self) -> None:
        if self._store is not None:
            self._store.close()
            self._store = None
