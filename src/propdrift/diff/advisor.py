"""Migration guidance derived from change records.

Turns ChangeRecords into warnings, prioritized suggestions, automatability
flags and before/after usage snippets.  Pure functions over diff models.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

from propdrift.diff.models import ChangeKind, ChangeRecord, ChangeSet, CodeExample, Severity
from propdrift.snapshot.models import PropSpec
from propdrift.snapshot.types import TypeKind, TypeTag

# Mechanically patchable: a codemod can add or drop a prop. Type changes
# need a human to pick the new value.
AUTOMATABLE_KINDS = frozenset(
    {ChangeKind.PROP_REMOVED, ChangeKind.PROP_ADDED, ChangeKind.PROP_REQUIRED_CHANGED}
)

Priority = Literal["high", "medium", "low"]

_PRIORITY_BY_SEVERITY: dict[Severity, Priority] = {
    Severity.BREAKING: "high",
    Severity.NON_BREAKING: "medium",
    Severity.ADDITION: "low",
    Severity.UNKNOWN: "medium",
}

_SEVERITY_ORDER = {
    Severity.BREAKING: 0,
    Severity.UNKNOWN: 1,
    Severity.NON_BREAKING: 2,
    Severity.ADDITION: 3,
}


@dataclass(frozen=True, slots=True)
class MigrationWarning:
    level: Literal["error", "warning"]
    message: str
    details: str

    def to_dict(self) -> dict[str, str]:
        return {"level": self.level, "message": self.message, "details": self.details}


@dataclass(frozen=True, slots=True)
class MigrationSuggestion:
    """Actionable fix for one breaking change."""

    component: str
    change: ChangeKind
    severity: Severity
    description: str
    migration: str
    automated: bool
    code_example: CodeExample | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "component": self.component,
            "change": self.change.value,
            "severity": self.severity.value,
            "description": self.description,
            "migration": self.migration,
            "automated": self.automated,
            "code_example": self.code_example.to_dict() if self.code_example else None,
        }


@dataclass(frozen=True, slots=True)
class MigrationAction:
    """One step of a version-to-version migration, tagged with a priority."""

    component: str
    prop_name: str
    change: ChangeKind
    severity: Severity
    priority: Priority
    description: str
    migration: str
    automated: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "component": self.component,
            "prop_name": self.prop_name,
            "change": self.change.value,
            "severity": self.severity.value,
            "priority": self.priority,
            "description": self.description,
            "migration": self.migration,
            "automated": self.automated,
        }


def can_automate(kind: ChangeKind) -> bool:
    return kind in AUTOMATABLE_KINDS


def generate_migration_warnings(change_set: ChangeSet) -> list[MigrationWarning]:
    """One top-level error plus one warning per component with breaking changes."""
    breaking = change_set.summary.breaking_changes
    if breaking == 0:
        return []

    warnings = [
        MigrationWarning(
            level="error",
            message=f"{breaking} breaking change{'s' if breaking != 1 else ''} detected",
            details="Review all breaking changes before upgrading to prevent runtime errors",
        )
    ]
    for component, records in change_set.component_changes.items():
        component_breaking = [r for r in records if r.is_breaking]
        if not component_breaking:
            continue
        warnings.append(
            MigrationWarning(
                level="warning",
                message=(
                    f"Component '{component}' has {len(component_breaking)} breaking "
                    f"change{'s' if len(component_breaking) != 1 else ''}"
                ),
                details="\n".join(f"- {r.description}: {r.migration}" for r in component_breaking),
            )
        )
    return warnings


def generate_migration_suggestions(change_set: ChangeSet) -> list[MigrationSuggestion]:
    """A suggestion for every breaking record, in component order."""
    suggestions: list[MigrationSuggestion] = []
    for component, records in change_set.component_changes.items():
        for record in records:
            if not record.is_breaking:
                continue
            suggestions.append(
                MigrationSuggestion(
                    component=component,
                    change=record.kind,
                    severity=record.severity,
                    description=record.description,
                    migration=record.migration,
                    automated=can_automate(record.kind),
                    code_example=record.code_example or generate_code_example(component, record),
                )
            )
    return suggestions


def generate_version_specific_migration(
    change_set: ChangeSet,
    from_version: str,
    to_version: str,
) -> list[MigrationAction]:
    """Migration actions for one version hop, breaking first.

    The sort is stable, so records keep engine order within a severity.
    """
    actions = [
        MigrationAction(
            component=record.component,
            prop_name=record.prop_name,
            change=record.kind,
            severity=record.severity,
            priority=_PRIORITY_BY_SEVERITY[record.severity],
            description=f"[{from_version} -> {to_version}] {record.description}",
            migration=record.migration,
            automated=can_automate(record.kind),
        )
        for record in change_set.records()
    ]
    actions.sort(key=lambda a: _SEVERITY_ORDER[a.severity])
    return actions


def generate_code_example(component: str, change: ChangeRecord) -> CodeExample | None:
    """Literal usage rewrite for a change, or None when no single example fits."""
    prop = change.prop_name
    if change.kind is ChangeKind.PROP_REMOVED:
        return CodeExample(
            before=f"<{component} {prop}={{value}} />",
            after=f"<{component} />",
        )
    if change.kind is ChangeKind.PROP_ADDED:
        if isinstance(change.new_value, PropSpec) and change.new_value.required:
            return CodeExample(
                before=f"<{component} />",
                after=f"<{component} {prop}={{/* provide value */}} />",
            )
        return None
    if change.kind is ChangeKind.PROP_TYPE_CHANGED:
        return CodeExample(
            before=f"<{component} {prop}={{{_placeholder(change.old_value)}}} />",
            after=f"<{component} {prop}={{{_placeholder(change.new_value)}}} />",
        )
    if change.kind is ChangeKind.PROP_REQUIRED_CHANGED:
        if change.new_value is True:
            return CodeExample(
                before=f"<{component} />",
                after=f"<{component} {prop}={{value}} />",
            )
        return None
    return None


def _placeholder(value: object) -> str:
    if isinstance(value, TypeTag):
        return f"/* {value} */"
    return "value"


def generate_type_migration(prop_name: str, old_type: TypeTag, new_type: TypeTag) -> str:
    """Prose guidance for a type transition.

    Recognizes optional widening, shape specialization, signature narrowing
    and union expansion; anything else gets the generic instruction.
    """
    undefined = TypeTag(kind=TypeKind.UNDEFINED)
    if new_type.is_union and set(new_type.members) == {*old_type.alternatives(), undefined}:
        return (
            f"Prop '{prop_name}' now accepts undefined. "
            "Existing code should work without changes."
        )
    if old_type.kind is TypeKind.OBJECT and new_type.kind in (TypeKind.SHAPE, TypeKind.REFERENCE):
        return (
            f"Prop '{prop_name}' now expects {new_type}. "
            "Ensure objects passed to it are properly typed."
        )
    if old_type.kind is TypeKind.FUNCTION and new_type.kind is TypeKind.SIGNATURE:
        return (
            f"Prop '{prop_name}' function signature changed. "
            f"Update callback to match: {new_type}"
        )
    if new_type.is_union:
        return (
            f"Prop '{prop_name}' now accepts multiple types: {new_type}. "
            "Review usage to ensure compatibility."
        )
    return (
        f"Update prop '{prop_name}' to use type '{new_type}' instead of '{old_type}'. "
        "Review all component usages."
    )
