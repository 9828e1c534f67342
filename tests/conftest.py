"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages,
and provides the snapshot builder shared across the suite.
"""

import sys
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any

import pytest

# Insert local src directory at the beginning of sys.path
# This ensures that the local propdrift package is used, not any installed one
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of propdrift modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("propdrift"):
        del sys.modules[module_name]

BASE_TIME = datetime(2024, 1, 1, tzinfo=UTC)

Interfaces = dict[str, dict[str, dict[str, Any]]]


@pytest.fixture
def make_snapshot() -> Callable[..., Any]:
    """Build a snapshot stamped ``days`` after 2024-01-01 UTC."""
    from propdrift.snapshot.models import InterfaceSnapshot

    def _make(version: str, interfaces: Interfaces, *, days: float = 0) -> InterfaceSnapshot:
        return InterfaceSnapshot.capture(
            interfaces, version, timestamp=BASE_TIME + timedelta(days=days)
        )

    return _make


@pytest.fixture
def memory_store() -> Any:
    from propdrift.store.memory import MemoryStore

    return MemoryStore()
