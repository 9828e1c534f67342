"""propdrift: track component prop interfaces across library releases."""

from propdrift.detector import (
    ChangeReport,
    Compared,
    DetectionResult,
    Failed,
    InterfaceChangeDetector,
    NoBaseline,
    generate_change_report,
)
from propdrift.diff import ChangeKind, ChangeRecord, ChangeSet, Severity, compare_interfaces
from propdrift.history import (
    HistoryManager,
    analyze_version_patterns,
    generate_compatibility_matrix,
    generate_multi_version_migration_path,
)
from propdrift.snapshot import InterfaceSnapshot, PropSpec, TypeTag
from propdrift.sources import InterfaceSource, StaticInterfaceSource
from propdrift.store import InterfaceStore, JsonFileStore, MemoryStore
from propdrift.versions import VersionChange, analyze_version_change

__version__ = "0.1.0"

__all__ = [
    "ChangeKind",
    "ChangeRecord",
    "ChangeReport",
    "ChangeSet",
    "Compared",
    "DetectionResult",
    "Failed",
    "HistoryManager",
    "InterfaceChangeDetector",
    "InterfaceSnapshot",
    "InterfaceSource",
    "InterfaceStore",
    "JsonFileStore",
    "MemoryStore",
    "NoBaseline",
    "PropSpec",
    "Severity",
    "StaticInterfaceSource",
    "TypeTag",
    "VersionChange",
    "analyze_version_change",
    "analyze_version_patterns",
    "compare_interfaces",
    "generate_change_report",
    "generate_compatibility_matrix",
    "generate_multi_version_migration_path",
]
