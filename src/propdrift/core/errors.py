"""propdrift error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Store
- 4xxx: Snapshot
- 9xxx: Internal
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002

    # Store (3xxx)
    STORE_READ_FAILED = 3001
    STORE_CORRUPT = 3002
    STORE_WRITE_FAILED = 3003

    # Snapshot (4xxx)
    SNAPSHOT_INVALID = 4001
    TYPE_TAG_INVALID = 4002

    # Internal (9xxx)
    INTERNAL_ERROR = 9001


@dataclass(frozen=True, slots=True)
class PropDriftError(Exception):
    """Base error with structured context for detection results."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'STORE_CORRUPT')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(PropDriftError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )


class StoreError(PropDriftError):
    """Persistent store failures (unreadable, corrupt or unwritable blobs)."""

    @classmethod
    def read_failed(cls, location: str, reason: str) -> "StoreError":
        return cls(
            code=ErrorCode.STORE_READ_FAILED,
            message=f"Could not read {location}: {reason}",
            retryable=True,
            details={"location": location, "reason": reason},
        )

    @classmethod
    def corrupt(cls, location: str, reason: str) -> "StoreError":
        return cls(
            code=ErrorCode.STORE_CORRUPT,
            message=f"Corrupt data in {location}: {reason}",
            details={"location": location, "reason": reason},
        )

    @classmethod
    def write_failed(cls, location: str, reason: str) -> "StoreError":
        return cls(
            code=ErrorCode.STORE_WRITE_FAILED,
            message=f"Could not write {location}: {reason}",
            retryable=True,
            details={"location": location, "reason": reason},
        )


class SnapshotError(PropDriftError):
    """Snapshot payloads that fail validation."""

    @classmethod
    def invalid(cls, reason: str, **details: Any) -> "SnapshotError":
        return cls(
            code=ErrorCode.SNAPSHOT_INVALID,
            message=f"Invalid snapshot: {reason}",
            details=details,
        )

    @classmethod
    def invalid_type(cls, text: str, reason: str) -> "SnapshotError":
        return cls(
            code=ErrorCode.TYPE_TAG_INVALID,
            message=f"Invalid type '{text}': {reason}",
            details={"type": text, "reason": reason},
        )


class InternalError(PropDriftError):
    """Internal/unexpected errors."""

    @classmethod
    def unexpected(cls, reason: str, **details: Any) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_ERROR,
            message=f"Internal error: {reason}",
            details=details,
        )
