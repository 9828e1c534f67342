"""Type-introspection source contract.

The detector never computes prop types itself; it asks a source for the
current component interfaces and the installed library version.
"""

from __future__ import annotations

import copy
from typing import Any, Protocol, runtime_checkable

RawInterfaces = dict[str, dict[str, dict[str, Any]]]
"""component -> prop -> {type, required, description}, as the source emits it."""


@runtime_checkable
class InterfaceSource(Protocol):
    """Protocol for type-introspection backends."""

    def extract_current_interfaces(self) -> RawInterfaces | None:
        """Current interfaces, or None when extraction failed.

        Implementations report failure by returning None, not by raising.
        """
        ...

    def sdk_version(self) -> str | None:
        """Installed library version, or None if it cannot be determined."""
        ...


class StaticInterfaceSource:
    """Source backed by an already-extracted interface mapping.

    Useful when extraction ran elsewhere (a build step, a fixture). A None
    mapping behaves like a failed extraction.
    """

    def __init__(self, interfaces: RawInterfaces | None, version: str | None = None) -> None:
        self._interfaces = interfaces
        self._version = version

    def extract_current_interfaces(self) -> RawInterfaces | None:
        if self._interfaces is None:
            return None
        return copy.deepcopy(self._interfaces)

    def sdk_version(self) -> str | None:
        return self._version
