"""Normalized prop type identifiers.

A prop type arrives from the introspection source as free text
(``"string | undefined"``, ``"() => void"``, ``"React.CSSProperties"``).
``TypeTag.parse`` turns it into a closed variant so the severity classifier
can match on structure instead of substrings.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum

from propdrift.core.errors import SnapshotError


class TypeKind(StrEnum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"
    FUNCTION = "function"
    SIGNATURE = "signature"  # concrete callable, e.g. "(user: User) => void"
    REACT_NODE = "react-node"
    ANY = "any"
    UNKNOWN = "unknown"
    UNDEFINED = "undefined"
    NULL = "null"
    SHAPE = "shape"  # inline object literal, e.g. "{ a: string }"
    REFERENCE = "reference"  # named type, e.g. "React.CSSProperties"
    LITERAL = "literal"  # quoted string or numeric literal
    UNION = "union"


PRIMITIVE_KINDS = frozenset({TypeKind.STRING, TypeKind.NUMBER, TypeKind.BOOLEAN})

# Kinds whose identity is carried by the ``name`` payload
_PAYLOAD_KINDS = frozenset(
    {TypeKind.ARRAY, TypeKind.SIGNATURE, TypeKind.SHAPE, TypeKind.REFERENCE, TypeKind.LITERAL}
)

_KEYWORDS: dict[str, TypeKind] = {
    "string": TypeKind.STRING,
    "number": TypeKind.NUMBER,
    "boolean": TypeKind.BOOLEAN,
    "bool": TypeKind.BOOLEAN,
    "array": TypeKind.ARRAY,
    "object": TypeKind.OBJECT,
    "function": TypeKind.FUNCTION,
    "Function": TypeKind.FUNCTION,
    "any": TypeKind.ANY,
    "unknown": TypeKind.UNKNOWN,
    "undefined": TypeKind.UNDEFINED,
    "null": TypeKind.NULL,
    "react-node": TypeKind.REACT_NODE,
    "ReactNode": TypeKind.REACT_NODE,
    "React.ReactNode": TypeKind.REACT_NODE,
}

_OPENERS = {"(": ")", "[": "]", "{": "}", "<": ">"}
_CLOSERS = {v: k for k, v in _OPENERS.items()}
_LITERAL_RE = re.compile(r"""^(?:'[^']*'|"[^"]*"|-?\d+(?:\.\d+)?|true|false)$""")
_WS_RE = re.compile(r"\s+")


@dataclass(frozen=True, slots=True, eq=False)
class TypeTag:
    """Closed variant for a prop type.

    ``name`` holds the payload text for payload kinds (the signature, the
    referenced type name, the array element text ...) and the source
    spelling of keyword aliases such as ``React.ReactNode``; ``members``
    holds the canonically ordered alternatives of a union.

    Equality ignores alias spelling: ``ReactNode`` equals ``react-node``.
    """

    kind: TypeKind
    name: str | None = None
    members: tuple[TypeTag, ...] = ()

    def _identity(self) -> tuple[object, ...]:
        payload = self.name if self.kind in _PAYLOAD_KINDS else None
        return (self.kind, payload, self.members)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TypeTag):
            return NotImplemented
        return self._identity() == other._identity()

    def __hash__(self) -> int:
        return hash(self._identity())

    @property
    def canonical(self) -> str:
        """Rendering with alias spellings replaced by the kind name."""
        if self.kind is TypeKind.UNION:
            return " | ".join(m.canonical for m in self.members)
        if self.kind in _PAYLOAD_KINDS and self.name is not None:
            return self.name
        return self.kind.value

    @classmethod
    def parse(cls, text: str) -> TypeTag:
        """Parse free-form type text into a normalized tag.

        Raises:
            SnapshotError: if the text is empty or has unbalanced brackets.
        """
        if not isinstance(text, str):
            raise SnapshotError.invalid_type(str(text), "type must be a string")
        normalized = _WS_RE.sub(" ", text).strip()
        if not normalized:
            raise SnapshotError.invalid_type(text, "empty type")

        parts = _split_top_level(normalized, text)
        if len(parts) == 1:
            return _parse_member(parts[0])

        members: dict[TypeTag, TypeTag] = {}
        for part in parts:
            member = _parse_member(part)
            # Nested unions flatten into the outer one
            for m in member.members if member.kind is TypeKind.UNION else (member,):
                members.setdefault(m, m)
        if len(members) == 1:
            return next(iter(members))
        ordered = tuple(sorted(members, key=lambda m: m.canonical))
        return cls(kind=TypeKind.UNION, members=ordered)

    @classmethod
    def union(cls, *tags: TypeTag) -> TypeTag:
        """Build a normalized union from existing tags."""
        return cls.parse(" | ".join(str(t) for t in tags))

    @property
    def is_union(self) -> bool:
        return self.kind is TypeKind.UNION

    @property
    def is_primitive(self) -> bool:
        return self.kind in PRIMITIVE_KINDS

    def alternatives(self) -> tuple[TypeTag, ...]:
        """Union members, or the tag itself for non-unions."""
        return self.members if self.is_union else (self,)

    def accepts(self, other: TypeTag) -> bool:
        """True if every alternative of ``other`` is an alternative of self."""
        mine = set(self.alternatives())
        return all(alt in mine for alt in other.alternatives())

    def __str__(self) -> str:
        if self.kind is TypeKind.UNION:
            return " | ".join(str(m) for m in self.members)
        return self.name if self.name is not None else self.kind.value


def _split_top_level(text: str, original: str) -> list[str]:
    """Split on ``|`` that is not nested inside brackets or quotes."""
    parts: list[str] = []
    stack: list[str] = []
    quote: str | None = None
    current: list[str] = []
    prev = ""
    for ch in text:
        if quote:
            if ch == quote:
                quote = None
            current.append(ch)
        elif ch in ("'", '"'):
            quote = ch
            current.append(ch)
        elif ch in _OPENERS:
            stack.append(ch)
            current.append(ch)
        elif ch == ">" and prev == "=":
            # Arrow in a signature, not a closing angle bracket
            current.append(ch)
        elif ch in _CLOSERS:
            if not stack or stack[-1] != _CLOSERS[ch]:
                raise SnapshotError.invalid_type(original, f"unbalanced '{ch}'")
            stack.pop()
            current.append(ch)
        elif ch == "|" and not stack:
            parts.append("".join(current).strip())
            current = []
        else:
            current.append(ch)
        prev = ch
    if stack or quote:
        raise SnapshotError.invalid_type(original, "unclosed bracket or quote")
    parts.append("".join(current).strip())
    if any(not p for p in parts):
        raise SnapshotError.invalid_type(original, "empty union member")
    return parts


def _parse_member(text: str) -> TypeTag:
    if text in _KEYWORDS:
        kind = _KEYWORDS[text]
        return TypeTag(kind=kind, name=None if text == kind.value else text)
    if _wrapped_in_parens(text):
        return TypeTag.parse(text[1:-1])
    if _has_top_level_arrow(text):
        return TypeTag(kind=TypeKind.SIGNATURE, name=text)
    if text.endswith("[]") or text.startswith(("Array<", "ReadonlyArray<")):
        return TypeTag(kind=TypeKind.ARRAY, name=text)
    if text.startswith("{"):
        return TypeTag(kind=TypeKind.SHAPE, name=text)
    if _LITERAL_RE.match(text):
        return TypeTag(kind=TypeKind.LITERAL, name=text)
    return TypeTag(kind=TypeKind.REFERENCE, name=text)


def _has_top_level_arrow(text: str) -> bool:
    """True if ``=>`` occurs outside every bracket and quote."""
    depth = 0
    quote: str | None = None
    prev = ""
    for ch in text:
        if quote:
            if ch == quote:
                quote = None
        elif ch in ("'", '"'):
            quote = ch
        elif ch == ">" and prev == "=":
            if depth == 0:
                return True
        elif ch in _OPENERS:
            depth += 1
        elif ch in _CLOSERS:
            depth -= 1
        prev = ch
    return False


def _wrapped_in_parens(text: str) -> bool:
    """True for ``(...)`` where the outer pair encloses the whole text."""
    if not (text.startswith("(") and text.endswith(")")):
        return False
    depth = 0
    for i, ch in enumerate(text):
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0 and i != len(text) - 1:
                return False
    return True
