"""Named and numeric character reference decoding.

The decoder replaces ``&name;``, ``&#NNN;`` and ``&#xHH;`` with the
characters they stand for. Named references are resolved through an
EntityTable so applications can swap the default table for their own.
A reference the table does not know is left in the text unchanged.

Example:
    >>> decode_entities("A &amp; B")
    'A & B'
    >>> decode_entities("&bogus; stays")
    '&bogus; stays'

Thread Safety:
Tables are immutable after creation. Decoding is a pure function.

"""

from __future__ import annotations

import re
from collections.abc import Mapping
from types import MappingProxyType
from typing import Protocol, runtime_checkable

# &name; or &#123; or &#x1F600;
_ENTITY_PATTERN = re.compile(r"&(#[0-9]{1,7}|#[xX][0-9a-fA-F]{1,6}|[A-Za-z][A-Za-z0-9]{0,31});")

_MAX_CODEPOINT = 0x10FFFF

DEFAULT_ENTITIES: Mapping[str, str] = MappingProxyType(
    {
        # Basic symbols
        "quot": "\u0022",
        "amp": "\u0026",
        "apos": "\u0027",
        "lt": "\u003C",
        "gt": "\u003E",
        "nbsp": "\u00A0",
        # Quotation marks
        "lsquo": "\u2018",
        "rsquo": "\u2019",
        "ldquo": "\u201C",
        "rdquo": "\u201D",
        "laquo": "\u00AB",
        "raquo": "\u00BB",
        # Dashes and ellipses
        "ndash": "\u2013",
        "mdash": "\u2014",
        "hellip": "\u2026",
        # Mathematical symbols
        "plusmn": "\u00B1",
        "times": "\u00D7",
        "divide": "\u00F7",
        "frac14": "\u00BC",
        "frac12": "\u00BD",
        "frac34": "\u00BE",
        # Currency
        "euro": "\u20AC",
        "pound": "\u00A3",
        "yen": "\u00A5",
        "cent": "\u00A2",
        "curren": "\u00A4",
        # Other symbols
        "copy": "\u00A9",
        "reg": "\u00AE",
        "trade": "\u2122",
        "sect": "\u00A7",
        "deg": "\u00B0",
        "permil": "\u2030",
        "bull": "\u2022",
        "middot": "\u00B7",
        "para": "\u00B6",
    }
)


@runtime_checkable
class EntityTable(Protocol):
    """Protocol for named entity lookup.

    Implementations map an entity name (without ``&`` and ``;``) to the
    text it stands for, or None when the name is unknown.

    """

    def lookup(self, name: str) -> str | None:
        """Return replacement text for name, or None."""
        ...


class MappingEntityTable:
    """EntityTable backed by a plain mapping.

    Example:
        >>> table = MappingEntityTable({"heart": "♥"})
        >>> decode_entities("I &heart; it", table)
        'I ♥ it'

    """

    __slots__ = ("_entities",)

    def __init__(self, entities: Mapping[str, str]) -> None:
        self._entities = MappingProxyType(dict(entities))

    def lookup(self, name: str) -> str | None:
        return self._entities.get(name)

    def __contains__(self, name: str) -> bool:
        return name in self._entities

    def __len__(self) -> int:
        return len(self._entities)

    def extended(self, entities: Mapping[str, str]) -> MappingEntityTable:
        """Return a new table with extra entries layered on top."""
        return MappingEntityTable({**self._entities, **entities})


class DefaultEntityTable(MappingEntityTable):
    """The built-in table of common named entities."""

    __slots__ = ()

    def __init__(self) -> None:
        super().__init__(DEFAULT_ENTITIES)


DEFAULT_ENTITY_TABLE = DefaultEntityTable()


def _decode_numeric(ref: str) -> str | None:
    if ref[1] in "xX":
        codepoint = int(ref[2:], 16)
    else:
        codepoint = int(ref[1:])
    if codepoint == 0 or codepoint > _MAX_CODEPOINT or 0xD800 <= codepoint <= 0xDFFF:
        return None
    return chr(codepoint)


def decode_entity(ref: str, table: EntityTable = DEFAULT_ENTITY_TABLE) -> str | None:
    """Decode a single reference body (the part between ``&`` and ``;``).

    Args:
        ref: Entity name like ``"amp"`` or numeric form like ``"#38"``
        table: Table used for named references

    Returns:
        Decoded text, or None if the reference is unknown or out of range
    """
    if ref.startswith("#"):
        return _decode_numeric(ref)
    return table.lookup(ref)


def decode_entities(text: str, table: EntityTable = DEFAULT_ENTITY_TABLE) -> str:
    """Replace every known character reference in text.

    Args:
        text: Text possibly containing references
        table: Table used for named references

    Returns:
        Text with references replaced; unknown references kept verbatim
    """
    if "&" not in text:
        return text

    def replace(match: re.Match[str]) -> str:
        decoded = decode_entity(match.group(1), table)
        return match.group(0) if decoded is None else decoded

    return _ENTITY_PATTERN.sub(replace, text)
