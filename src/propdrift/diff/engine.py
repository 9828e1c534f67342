"""Pure interface diff engine.

Compares two ``component -> prop -> PropSpec`` mappings and classifies every
change.  No storage access, purely functional.

Change kinds:
- prop_added: prop in new but not old
- prop_removed: prop in old but not new
- prop_type_changed: same prop, different TypeTag
- prop_required_changed: same prop, required flag flipped
- prop_description_changed: same prop, different description

Component and prop names are visited in sorted order so identical inputs
always produce identical record order.
"""

from __future__ import annotations

from collections.abc import Mapping

import structlog

from propdrift.diff.classifier import (
    DEFAULT_COMPATIBILITY,
    TypeCompatibility,
    compare_prop_specs,
)
from propdrift.diff.models import ChangeRecord, ChangeSet, ChangeSummary, Severity
from propdrift.snapshot.models import InterfaceSnapshot, PropSpec

log = structlog.get_logger(__name__)

Interfaces = Mapping[str, Mapping[str, PropSpec]]


def compare_interfaces(
    old: Interfaces | None,
    new: Interfaces | None,
    compatibility: TypeCompatibility = DEFAULT_COMPATIBILITY,
) -> ChangeSet:
    """Diff two interface mappings.

    Args:
        old: component -> prop -> spec at the earlier version
        new: component -> prop -> spec at the later version
        compatibility: type compatibility rule table

    Returns:
        ChangeSet whose summary counts always agree with its records.
    """
    old = old or {}
    new = new or {}
    change_set = ChangeSet()

    for component in sorted(set(old) | set(new)):
        old_props = old.get(component) or {}
        new_props = new.get(component) or {}

        records: list[ChangeRecord] = []
        for prop_name in sorted(set(old_props) | set(new_props)):
            records.extend(
                compare_prop_specs(
                    component,
                    prop_name,
                    old_props.get(prop_name),
                    new_props.get(prop_name),
                    compatibility,
                )
            )

        if records:
            change_set.component_changes[component] = records

    change_set.summary = summarize(change_set.component_changes)
    return change_set


def compare_snapshots(
    old: InterfaceSnapshot,
    new: InterfaceSnapshot,
    compatibility: TypeCompatibility = DEFAULT_COMPATIBILITY,
) -> ChangeSet:
    """Diff two snapshots' interfaces."""
    change_set = compare_interfaces(old.interfaces, new.interfaces, compatibility)
    log.debug(
        "snapshots_compared",
        old_version=old.sdk_version,
        new_version=new.sdk_version,
        total=change_set.summary.total_changes,
        breaking=change_set.summary.breaking_changes,
    )
    return change_set


def summarize(component_changes: Mapping[str, list[ChangeRecord]]) -> ChangeSummary:
    """Count records by severity.

    UNKNOWN-severity records count toward the total only; the classifier
    never produces them, so the total equals the sum of the three buckets.
    """
    summary = ChangeSummary()
    for records in component_changes.values():
        if not records:
            continue
        summary.components_affected += 1
        for record in records:
            summary.total_changes += 1
            if record.severity is Severity.BREAKING:
                summary.breaking_changes += 1
            elif record.severity is Severity.NON_BREAKING:
                summary.non_breaking_changes += 1
            elif record.severity is Severity.ADDITION:
                summary.additions += 1
    return summary
