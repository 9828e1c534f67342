"""Interface diff package: prop-level change detection and migration guidance.

Public API re-exports for the diff subpackage.
"""

from propdrift.diff.advisor import (
    MigrationAction,
    MigrationSuggestion,
    MigrationWarning,
    can_automate,
    generate_code_example,
    generate_migration_suggestions,
    generate_migration_warnings,
    generate_type_migration,
    generate_version_specific_migration,
)
from propdrift.diff.classifier import (
    DEFAULT_RULES,
    CompatibilityRule,
    TypeCompatibility,
    compare_prop_specs,
    is_type_change_breaking,
)
from propdrift.diff.engine import compare_interfaces, compare_snapshots
from propdrift.diff.models import (
    ChangeKind,
    ChangeRecord,
    ChangeSet,
    ChangeSummary,
    CodeExample,
    Severity,
)

__all__ = [
    "ChangeKind",
    "ChangeRecord",
    "ChangeSet",
    "ChangeSummary",
    "CodeExample",
    "CompatibilityRule",
    "DEFAULT_RULES",
    "MigrationAction",
    "MigrationSuggestion",
    "MigrationWarning",
    "Severity",
    "TypeCompatibility",
    "can_automate",
    "compare_interfaces",
    "compare_prop_specs",
    "compare_snapshots",
    "generate_code_example",
    "generate_migration_suggestions",
    "generate_migration_warnings",
    "generate_type_migration",
    "generate_version_specific_migration",
    "is_type_change_breaking",
]
