"""Severity classification for prop-level changes.

The per-property comparator decides *what* changed; ``TypeCompatibility``
decides whether a type transition can break existing callers.  Type
compatibility is a rule table: each rule is a named predicate over
``(old, new)`` tags that, when it matches, marks the transition as safe.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, replace

from propdrift.diff.advisor import generate_code_example, generate_type_migration
from propdrift.diff.models import ChangeKind, ChangeRecord, Severity
from propdrift.snapshot.models import PropSpec
from propdrift.snapshot.types import TypeKind, TypeTag


@dataclass(frozen=True, slots=True)
class CompatibilityRule:
    """A widening that existing call sites survive."""

    name: str
    matches: Callable[[TypeTag, TypeTag], bool]


def _optional_widening(old: TypeTag, new: TypeTag) -> bool:
    # T -> T | undefined for primitive T
    return (
        old.is_primitive
        and new.is_union
        and set(new.members) == {old, TypeTag(kind=TypeKind.UNDEFINED)}
    )


def _object_specialization(old: TypeTag, new: TypeTag) -> bool:
    return old.kind is TypeKind.OBJECT and new.kind in (TypeKind.SHAPE, TypeKind.REFERENCE)


def _function_specialization(old: TypeTag, new: TypeTag) -> bool:
    return old.kind is TypeKind.FUNCTION and new.kind is TypeKind.SIGNATURE


def _any_specialization(old: TypeTag, new: TypeTag) -> bool:
    return old.kind is TypeKind.ANY and new.kind is not TypeKind.ANY


DEFAULT_RULES: tuple[CompatibilityRule, ...] = (
    CompatibilityRule("optional-widening", _optional_widening),
    CompatibilityRule("object-specialization", _object_specialization),
    CompatibilityRule("function-specialization", _function_specialization),
    CompatibilityRule("any-specialization", _any_specialization),
)


class TypeCompatibility:
    """Decides whether a prop type transition is breaking.

    Non-breaking when a rule in the table matches, or when the new type is a
    union that still contains every alternative of the old type.  Everything
    else, including any narrowing, is breaking.
    """

    def __init__(self, rules: Iterable[CompatibilityRule] = DEFAULT_RULES) -> None:
        self.rules: tuple[CompatibilityRule, ...] = tuple(rules)

    def matching_rule(self, old: TypeTag, new: TypeTag) -> str | None:
        """Name of the compatibility rule that accepts the transition, if any."""
        for rule in self.rules:
            if rule.matches(old, new):
                return rule.name
        if new.is_union and new.accepts(old):
            return "union-superset"
        return None

    def is_breaking(self, old: TypeTag, new: TypeTag) -> bool:
        if old == new:
            return False
        return self.matching_rule(old, new) is None


DEFAULT_COMPATIBILITY = TypeCompatibility()


def is_type_change_breaking(
    old_type: TypeTag,
    new_type: TypeTag,
    compatibility: TypeCompatibility = DEFAULT_COMPATIBILITY,
) -> bool:
    return compatibility.is_breaking(old_type, new_type)


def compare_prop_specs(
    component: str,
    prop_name: str,
    old: PropSpec | None,
    new: PropSpec | None,
    compatibility: TypeCompatibility = DEFAULT_COMPATIBILITY,
) -> list[ChangeRecord]:
    """Compare one prop across two versions.

    Emits records in a fixed order (type, required, description) so a prop
    that changes several attributes at once yields one record per attribute.
    """
    records: list[ChangeRecord] = []

    if old is None and new is None:
        return records

    if old is None and new is not None:
        migration = (
            f"Add required prop '{prop_name}' of type '{new.type}' to all {component} usages"
            if new.required
            else f"Optional prop '{prop_name}' of type '{new.type}' is now available"
        )
        records.append(
            ChangeRecord(
                component=component,
                prop_name=prop_name,
                kind=ChangeKind.PROP_ADDED,
                severity=Severity.ADDITION,
                old_value=None,
                new_value=new,
                description=f"New prop '{prop_name}' added",
                migration=migration,
            )
        )
    elif old is not None and new is None:
        records.append(
            ChangeRecord(
                component=component,
                prop_name=prop_name,
                kind=ChangeKind.PROP_REMOVED,
                severity=Severity.BREAKING,
                old_value=old,
                new_value=None,
                description=f"Prop '{prop_name}' was removed",
                migration=(
                    f"Remove prop '{prop_name}' from all {component} usages; "
                    "its functionality may have moved elsewhere"
                ),
            )
        )
    elif old is not None and new is not None:
        if old.type != new.type:
            breaking = compatibility.is_breaking(old.type, new.type)
            records.append(
                ChangeRecord(
                    component=component,
                    prop_name=prop_name,
                    kind=ChangeKind.PROP_TYPE_CHANGED,
                    severity=Severity.BREAKING if breaking else Severity.NON_BREAKING,
                    old_value=old.type,
                    new_value=new.type,
                    description=(
                        f"Prop '{prop_name}' type changed from '{old.type}' to '{new.type}'"
                    ),
                    migration=generate_type_migration(prop_name, old.type, new.type),
                )
            )

        if old.required != new.required:
            records.append(
                ChangeRecord(
                    component=component,
                    prop_name=prop_name,
                    kind=ChangeKind.PROP_REQUIRED_CHANGED,
                    # Optional -> required breaks callers that omit the prop
                    severity=Severity.BREAKING if new.required else Severity.NON_BREAKING,
                    old_value=old.required,
                    new_value=new.required,
                    description=(
                        f"Prop '{prop_name}' changed from {_requiredness(old.required)} "
                        f"to {_requiredness(new.required)}"
                    ),
                    migration=(
                        f"Prop '{prop_name}' is now required; ensure all {component} usages provide it"
                        if new.required
                        else f"Prop '{prop_name}' is now optional; you can omit it if not needed"
                    ),
                )
            )

        if old.description != new.description:
            records.append(
                ChangeRecord(
                    component=component,
                    prop_name=prop_name,
                    kind=ChangeKind.PROP_DESCRIPTION_CHANGED,
                    severity=Severity.NON_BREAKING,
                    old_value=old.description,
                    new_value=new.description,
                    description=f"Prop '{prop_name}' description updated",
                    migration="No migration required, description change only",
                )
            )

    return [replace(r, code_example=generate_code_example(component, r)) for r in records]


def _requiredness(required: bool) -> str:
    return "required" if required else "optional"
