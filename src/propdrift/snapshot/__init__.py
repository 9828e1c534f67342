"""Snapshot model: normalized prop types and per-version interface captures."""

from propdrift.snapshot.models import ComponentInterface, InterfaceSnapshot, PropSpec
from propdrift.snapshot.types import PRIMITIVE_KINDS, TypeKind, TypeTag

__all__ = [
    "ComponentInterface",
    "InterfaceSnapshot",
    "PRIMITIVE_KINDS",
    "PropSpec",
    "TypeKind",
    "TypeTag",
]
