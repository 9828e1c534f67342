"""Persistent store backends."""

from propdrift.store.base import InterfaceStore
from propdrift.store.json_store import JsonFileStore
from propdrift.store.memory import MemoryStore

__all__ = ["InterfaceStore", "JsonFileStore", "MemoryStore"]
