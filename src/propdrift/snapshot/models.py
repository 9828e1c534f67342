"""Validated snapshot models.

Snapshots are persisted as JSON in the shape the detector has always
written::

    {"timestamp": "...", "sdkVersion": "2.8.1", "interfaces": {...},
     "generatedBy": "..."}

Loading goes through pydantic so a corrupt or hand-edited blob fails loudly
at the store boundary instead of deep inside the diff.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_serializer,
    field_validator,
)

from propdrift.config.constants import GENERATED_BY, UNKNOWN_VERSION
from propdrift.core.errors import PropDriftError, SnapshotError
from propdrift.snapshot.types import TypeTag

ComponentInterface = dict[str, "PropSpec"]


class PropSpec(BaseModel):
    """Public surface of a single prop."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    type: TypeTag
    required: bool = False
    description: str = ""

    @field_validator("type", mode="before")
    @classmethod
    def parse_type(cls, v: Any) -> TypeTag:
        if isinstance(v, TypeTag):
            return v
        try:
            return TypeTag.parse(v)
        except PropDriftError as e:
            raise ValueError(e.message) from e

    @field_validator("description", mode="before")
    @classmethod
    def coerce_description(cls, v: Any) -> str:
        return "" if v is None else v

    @field_serializer("type")
    def serialize_type(self, tag: TypeTag) -> str:
        return str(tag)


class InterfaceSnapshot(BaseModel):
    """Prop surface of every tracked component for one SDK version.

    Identified by ``sdk_version``; immutable once created.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    sdk_version: str = Field(alias="sdkVersion")
    timestamp: datetime
    interfaces: dict[str, dict[str, PropSpec]] = Field(default_factory=dict)
    generated_by: str = Field(default=GENERATED_BY, alias="generatedBy")

    @field_validator("sdk_version", mode="before")
    @classmethod
    def default_version(cls, v: Any) -> str:
        return v or UNKNOWN_VERSION

    @field_validator("timestamp")
    @classmethod
    def ensure_aware(cls, v: datetime) -> datetime:
        # Naive timestamps are treated as UTC so they order against aware ones
        if v.tzinfo is None:
            return v.replace(tzinfo=UTC)
        return v

    @field_validator("interfaces", mode="before")
    @classmethod
    def drop_null_components(cls, v: Any) -> Any:
        if v is None:
            return {}
        if isinstance(v, dict):
            return {name: (props or {}) for name, props in v.items()}
        return v

    @classmethod
    def capture(
        cls,
        interfaces: dict[str, dict[str, Any]],
        sdk_version: str | None,
        *,
        timestamp: datetime | None = None,
    ) -> InterfaceSnapshot:
        """Build a snapshot from freshly extracted interfaces."""
        return cls.from_dict(
            {
                "sdkVersion": sdk_version or UNKNOWN_VERSION,
                "timestamp": timestamp or datetime.now(UTC),
                "interfaces": interfaces,
            }
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> InterfaceSnapshot:
        """Validate a persisted or extracted payload.

        Raises:
            SnapshotError: if the payload does not describe a snapshot.
        """
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            err = e.errors()[0]
            location = ".".join(str(loc) for loc in err["loc"])
            raise SnapshotError.invalid(
                f"{location}: {err['msg']}",
                location=location,
                version=data.get("sdkVersion") if isinstance(data, dict) else None,
            ) from e

    def to_dict(self) -> dict[str, Any]:
        """JSON-compatible payload in the persisted wire shape."""
        return self.model_dump(mode="json", by_alias=True)

    @property
    def component_names(self) -> list[str]:
        return sorted(self.interfaces)
