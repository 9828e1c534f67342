"""Unit tests for the diff engine (engine.py).

Tests cover:
- Idempotence: comparing a snapshot with itself
- Determinism of record order
- Summary additivity
- Disjoint and empty component sets
- ChangeSet helpers and serialization
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from propdrift.diff.engine import compare_interfaces, compare_snapshots
from propdrift.diff.models import ChangeKind, ChangeSet, Severity
from propdrift.snapshot.models import InterfaceSnapshot

OLD = {
    "SignIn": {
        "redirectTo": {"type": "string", "required": False},
        "legacyMode": {"type": "boolean"},
        "appearance": {"type": "object"},
    },
    "UserButton": {
        "afterSignOutUrl": {"type": "string"},
    },
    "Protect": {
        "role": {"type": "string", "required": True},
    },
}

NEW = {
    "SignIn": {
        "redirectTo": {"type": "string", "required": True},
        "appearance": {"type": "{ theme: string }"},
        "theme": {"type": "'light' | 'dark'"},
    },
    "UserButton": {
        "afterSignOutUrl": {"type": "string | undefined"},
    },
    "Protect": {
        "role": {"type": "string", "required": True},
    },
    "SignUp": {
        "routing": {"type": "'path' | 'hash'", "required": True},
    },
}


def _interfaces(raw: dict[str, dict[str, dict[str, Any]]]) -> dict[str, Any]:
    return InterfaceSnapshot.capture(raw, "x").interfaces


def _assert_additive(change_set: ChangeSet) -> None:
    summary = change_set.summary
    assert summary.total_changes == (
        summary.breaking_changes + summary.non_breaking_changes + summary.additions
    )
    assert summary.total_changes == len(change_set.records())
    assert summary.components_affected == len(change_set.component_changes)


# ============================================================================
# Properties
# ============================================================================


class TestCompareInterfacesProperties:
    """Invariants that hold for any input."""

    def test_idempotence(self) -> None:
        """Comparing a snapshot with itself yields no changes."""
        for raw in (OLD, NEW, {}):
            interfaces = _interfaces(raw)
            change_set = compare_interfaces(interfaces, interfaces)
            assert change_set.summary.total_changes == 0
            assert change_set.component_changes == {}

    def test_determinism(self) -> None:
        """Identical inputs give identical records in identical order."""
        first = compare_interfaces(_interfaces(OLD), _interfaces(NEW))
        second = compare_interfaces(_interfaces(OLD), _interfaces(NEW))

        assert first.to_dict() == second.to_dict()
        assert [(r.component, r.prop_name, r.kind) for r in first.records()] == [
            (r.component, r.prop_name, r.kind) for r in second.records()
        ]

    def test_insertion_order_does_not_matter(self) -> None:
        reversed_new = {name: dict(reversed(props.items())) for name, props in reversed(NEW.items())}
        a = compare_interfaces(_interfaces(OLD), _interfaces(NEW))
        b = compare_interfaces(_interfaces(OLD), _interfaces(reversed_new))
        assert a.to_dict() == b.to_dict()

    def test_additivity(self) -> None:
        _assert_additive(compare_interfaces(_interfaces(OLD), _interfaces(NEW)))
        _assert_additive(compare_interfaces(_interfaces(NEW), _interfaces(OLD)))


# ============================================================================
# Behaviour
# ============================================================================


class TestCompareInterfaces:
    """Tests for compare_interfaces output."""

    def test_mixed_changes(self) -> None:
        change_set = compare_interfaces(_interfaces(OLD), _interfaces(NEW))

        assert list(change_set.component_changes) == ["SignIn", "SignUp", "UserButton"]
        sign_in = [(r.prop_name, r.kind, r.severity) for r in change_set.component_changes["SignIn"]]
        assert sign_in == [
            ("appearance", ChangeKind.PROP_TYPE_CHANGED, Severity.NON_BREAKING),
            ("legacyMode", ChangeKind.PROP_REMOVED, Severity.BREAKING),
            ("redirectTo", ChangeKind.PROP_REQUIRED_CHANGED, Severity.BREAKING),
            ("theme", ChangeKind.PROP_ADDED, Severity.ADDITION),
        ]
        assert change_set.summary.breaking_changes == 2
        assert change_set.summary.non_breaking_changes == 2
        assert change_set.summary.additions == 2
        assert change_set.summary.total_changes == 6
        assert change_set.has_breaking_changes

    def test_unchanged_component_is_omitted(self) -> None:
        change_set = compare_interfaces(_interfaces(OLD), _interfaces(NEW))
        assert "Protect" not in change_set.component_changes

    def test_empty_new_removes_everything(self) -> None:
        change_set = compare_interfaces(_interfaces(OLD), {})

        records = change_set.records()
        assert len(records) == 5
        assert all(r.kind is ChangeKind.PROP_REMOVED for r in records)
        assert all(r.severity is Severity.BREAKING for r in records)

    def test_disjoint_components(self) -> None:
        change_set = compare_interfaces(
            _interfaces({"A": {"x": {"type": "string"}}}),
            _interfaces({"B": {"y": {"type": "number"}}}),
        )

        assert [r.kind for r in change_set.component_changes["A"]] == [ChangeKind.PROP_REMOVED]
        assert [r.kind for r in change_set.component_changes["B"]] == [ChangeKind.PROP_ADDED]

    def test_none_inputs_are_empty(self) -> None:
        assert compare_interfaces(None, None).summary.total_changes == 0

    def test_by_severity(self) -> None:
        change_set = compare_interfaces(_interfaces(OLD), _interfaces(NEW))
        assert {r.prop_name for r in change_set.by_severity(Severity.ADDITION)} == {
            "theme",
            "routing",
        }


class TestCompareSnapshots:
    def test_scenario_a_required_tightening(
        self, make_snapshot: Callable[..., InterfaceSnapshot]
    ) -> None:
        old = make_snapshot("1.0.0", {"SignIn": {"redirectTo": {"type": "string"}}})
        new = make_snapshot(
            "1.1.0", {"SignIn": {"redirectTo": {"type": "string", "required": True}}}, days=1
        )

        change_set = compare_snapshots(old, new)

        records = change_set.records()
        assert len(records) == 1
        assert records[0].kind is ChangeKind.PROP_REQUIRED_CHANGED
        assert records[0].severity is Severity.BREAKING

    def test_scenario_b_optional_addition(
        self, make_snapshot: Callable[..., InterfaceSnapshot]
    ) -> None:
        old = make_snapshot("1.0.0", {"SignIn": {}})
        new = make_snapshot("1.1.0", {"SignIn": {"theme": {"type": "string"}}}, days=1)

        records = compare_snapshots(old, new).records()

        assert [(r.kind, r.severity) for r in records] == [
            (ChangeKind.PROP_ADDED, Severity.ADDITION)
        ]


class TestChangeSetSerialization:
    def test_record_to_dict(self) -> None:
        change_set = compare_interfaces(
            _interfaces({"SignIn": {"p": {"type": "string"}}}),
            _interfaces({"SignIn": {"p": {"type": "number"}}}),
        )

        data = change_set.to_dict()

        record = data["component_changes"]["SignIn"][0]
        assert record["type"] == "prop_type_changed"
        assert record["severity"] == "breaking"
        assert record["old_value"] == "string"
        assert record["new_value"] == "number"
        assert record["code_example"] == {
            "before": "<SignIn p={/* string */} />",
            "after": "<SignIn p={/* number */} />",
        }
        assert data["summary"]["breaking_changes"] == 1
