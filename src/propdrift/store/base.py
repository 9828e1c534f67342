"""Persistent store contract.

Stores move JSON-compatible dicts only; validation into snapshot models
happens in the callers so every backend shares one set of rules.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class InterfaceStore(ABC):
    """Key/value blob store for the latest snapshot and the history log.

    Implementations raise ``StoreError`` when a blob exists but cannot be
    read or parsed, and return None when it simply is not there yet.
    """

    @abstractmethod
    def load_snapshot(self) -> dict[str, Any] | None:
        """Latest persisted snapshot payload, or None on first run."""

    @abstractmethod
    def save_snapshot(self, data: dict[str, Any]) -> None:
        """Replace the latest snapshot payload."""

    @abstractmethod
    def load_history(self) -> dict[str, Any] | None:
        """History payload ``{versions, analytics}``, or None if absent."""

    @abstractmethod
    def save_history(self, data: dict[str, Any]) -> None:
        """Replace the history payload as one blob."""
