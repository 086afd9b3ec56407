# src/log_manager/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the store.

The store depends on Protocols instead of concrete implementations,
so tests can swap the on-disk gateway for an in-memory one.
"""

from typing import Protocol

from ..store.models import AppData


class DocumentGateway(Protocol):
    """Whole-document persistence: load everything, save everything."""

    def load(self) -> AppData: ...

    def save(self, data: AppData) -> None:
        """Persist `data`; raise PersistenceError on failure."""
        ...
