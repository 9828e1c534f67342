"""Data models for interface diffs.

All models are plain dataclasses with no storage coupling.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from propdrift.snapshot.models import PropSpec
from propdrift.snapshot.types import TypeTag


class ChangeKind(StrEnum):
    PROP_ADDED = "prop_added"
    PROP_REMOVED = "prop_removed"
    PROP_TYPE_CHANGED = "prop_type_changed"
    PROP_REQUIRED_CHANGED = "prop_required_changed"
    PROP_DESCRIPTION_CHANGED = "prop_description_changed"


class Severity(StrEnum):
    BREAKING = "breaking"
    NON_BREAKING = "non-breaking"
    ADDITION = "addition"
    UNKNOWN = "unknown"


# Value carried in old_value/new_value: a whole PropSpec for additions and
# removals, the type for type changes, the flag or text otherwise.
ChangeValue = PropSpec | TypeTag | bool | str | None


@dataclass(frozen=True, slots=True)
class CodeExample:
    """Literal before/after usage snippet for one change."""

    before: str
    after: str

    def to_dict(self) -> dict[str, str]:
        return {"before": self.before, "after": self.after}


@dataclass(frozen=True, slots=True)
class ChangeRecord:
    """One structural change to one prop of one component."""

    component: str
    prop_name: str
    kind: ChangeKind
    severity: Severity
    old_value: ChangeValue
    new_value: ChangeValue
    description: str
    migration: str
    code_example: CodeExample | None = None

    def __post_init__(self) -> None:
        if self.old_value is None and self.new_value is None:
            raise ValueError(f"ChangeRecord for '{self.prop_name}' has neither old nor new value")

    @property
    def is_breaking(self) -> bool:
        return self.severity is Severity.BREAKING

    def to_dict(self) -> dict[str, Any]:
        return {
            "component": self.component,
            "prop_name": self.prop_name,
            "type": self.kind.value,
            "severity": self.severity.value,
            "old_value": _value_to_json(self.old_value),
            "new_value": _value_to_json(self.new_value),
            "description": self.description,
            "migration": self.migration,
            "code_example": self.code_example.to_dict() if self.code_example else None,
        }


def _value_to_json(value: ChangeValue) -> Any:
    if isinstance(value, PropSpec):
        return value.model_dump(mode="json")
    if isinstance(value, TypeTag):
        return str(value)
    return value


@dataclass
class ChangeSummary:
    """Aggregate counts for a ChangeSet."""

    total_changes: int = 0
    breaking_changes: int = 0
    non_breaking_changes: int = 0
    additions: int = 0
    components_affected: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "total_changes": self.total_changes,
            "breaking_changes": self.breaking_changes,
            "non_breaking_changes": self.non_breaking_changes,
            "additions": self.additions,
            "components_affected": self.components_affected,
        }


@dataclass
class ChangeSet:
    """Result of comparing two snapshots' interfaces.

    ``component_changes`` preserves the deterministic (sorted) component
    order produced by the engine; components without changes are absent.
    """

    summary: ChangeSummary = field(default_factory=ChangeSummary)
    component_changes: dict[str, list[ChangeRecord]] = field(default_factory=dict)

    @property
    def has_breaking_changes(self) -> bool:
        return self.summary.breaking_changes > 0

    def records(self) -> list[ChangeRecord]:
        """All records, component by component."""
        return [r for records in self.component_changes.values() for r in records]

    def by_severity(self, severity: Severity) -> list[ChangeRecord]:
        return [r for r in self.records() if r.severity is severity]

    def to_dict(self) -> dict[str, Any]:
        return {
            "summary": self.summary.to_dict(),
            "component_changes": {
                name: [r.to_dict() for r in records]
                for name, records in self.component_changes.items()
            },
        }
