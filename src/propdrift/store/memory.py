"""In-memory store for tests and embedding callers."""

from __future__ import annotations

import copy
from typing import Any

from propdrift.store.base import InterfaceStore


class MemoryStore(InterfaceStore):
    """Holds deep copies, so callers cannot mutate persisted state by reference."""

    def __init__(
        self,
        snapshot: dict[str, Any] | None = None,
        history: dict[str, Any] | None = None,
    ) -> None:
        self.snapshot = copy.deepcopy(snapshot)
        self.history = copy.deepcopy(history)
        self.writes = 0

    def load_snapshot(self) -> dict[str, Any] | None:
        return copy.deepcopy(self.snapshot)

    def save_snapshot(self, data: dict[str, Any]) -> None:
        self.snapshot = copy.deepcopy(data)
        self.writes += 1

    def load_history(self) -> dict[str, Any] | None:
        return copy.deepcopy(self.history)

    def save_history(self, data: dict[str, Any]) -> None:
        self.history = copy.deepcopy(data)
        self.writes += 1
