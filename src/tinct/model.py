"""Range/attribute model: styling layers and their resolution.

A RangeEntry is one styling layer: an attribute set applied to a character
range at a level. Resolution starts from the base attributes over the whole
text, then applies every entry in ascending ``(level, insertion order)``.
Applying overrides the keys an entry defines and leaves the others alone, so
for any character and key the winning value comes from the highest-level
covering entry that defines the key, then lower levels, then the base.

Example:
    >>> entries = [
    ...     RangeEntry({"color": "red"}, TextRange(0, 10), level=1),
    ...     RangeEntry({"color": "blue"}, TextRange(5, 10), level=2),
    ... ]
    >>> result = resolve_attributes("0123456789", {}, entries)
    >>> [(str(r), dict(a)) for r, a in result.runs()]
    [('[0, 5)', {'color': 'red'}), ('[5, 10)', {'color': 'blue'})]

Thread Safety:
RangeEntry is frozen. AttributedText is a mutable sink local to one
resolution; do not share it while it is being filled.

"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from tinct.attributes import EMPTY_ATTRIBUTES, AttributeSet, freeze_attributes, merge_attributes
from tinct.errors import InvalidRangeError
from tinct.ranges import TextRange

if TYPE_CHECKING:
    from tinct.renderers.protocol import RenderSink


@dataclass(frozen=True, slots=True)
class RangeEntry:
    """One styling layer.

    Attributes:
        attributes: Attribute set to apply (frozen on construction)
        range: Characters the layer covers
        level: Priority; higher levels win on conflicting keys

    """

    attributes: AttributeSet
    range: TextRange
    level: int = 0

    def __post_init__(self) -> None:
        if self.level < 0:
            msg = f"level must be non-negative, got {self.level}"
            raise ValueError(msg)
        object.__setattr__(self, "attributes", freeze_attributes(self.attributes))


def ordered_entries(entries: Iterable[RangeEntry]) -> list[RangeEntry]:
    """Entries in application order: level, then insertion order."""
    indexed = sorted(enumerate(entries), key=lambda pair: (pair[1].level, pair[0]))
    return [entry for _, entry in indexed]


def apply_entries[T](
    sink: RenderSink[T],
    text: str,
    base_attributes: Mapping[str, Any],
    entries: Iterable[RangeEntry],
) -> T:
    """Drive sink through the resolution of entries over text.

    Raises:
        InvalidRangeError: If an entry's range does not fit text
    """
    length = len(text)
    sink.begin(text, freeze_attributes(base_attributes))
    for entry in ordered_entries(entries):
        if not entry.attributes:
            continue
        sink.add_attributes(entry.attributes, entry.range.check(length))
    return sink.finish()


class AttributedText:
    """Text with one resolved attribute set per character.

    The default RenderSink. Per-character sets are shared between
    characters that carry the same styling, so memory grows with the
    number of distinct runs rather than with text length times keys.

    Example:
        >>> at = AttributedText("hello", {"font": "Body"})
        >>> at.add_attributes({"bold": True}, TextRange(0, 2))
        >>> dict(at.attributes_at(0)), dict(at.attributes_at(4))
        ({'font': 'Body', 'bold': True}, {'font': 'Body'})

    """

    __slots__ = ("_chars", "_text")

    def __init__(self, text: str = "", base_attributes: Mapping[str, Any] | None = None) -> None:
        self._text = ""
        self._chars: list[AttributeSet] = []
        self.begin(text, freeze_attributes(base_attributes))

    # RenderSink protocol

    def begin(self, text: str, base_attributes: AttributeSet) -> None:
        self._text = text
        self._chars = [freeze_attributes(base_attributes)] * len(text)

    def add_attributes(self, attributes: AttributeSet, span: TextRange) -> None:
        span.check(len(self._text))
        if not attributes:
            return
        # Characters sharing a set before the update share the merged one after
        merged_for: dict[int, tuple[AttributeSet, AttributeSet]] = {}
        chars = self._chars
        for i in range(span.start, span.end):
            current = chars[i]
            cached = merged_for.get(id(current))
            if cached is None:
                cached = (current, merge_attributes(current, attributes))
                merged_for[id(current)] = cached
            chars[i] = cached[1]

    def finish(self) -> AttributedText:
        return self

    # Queries

    @property
    def text(self) -> str:
        return self._text

    def attributes_at(self, index: int) -> AttributeSet:
        """Resolved attribute set of the character at index.

        Raises:
            InvalidRangeError: If index is outside the text
        """
        if not 0 <= index < len(self._chars):
            raise InvalidRangeError(index, index + 1, len(self._chars))
        return self._chars[index]

    def runs(self) -> list[tuple[TextRange, AttributeSet]]:
        """Maximal runs of characters with equal attribute sets."""
        result: list[tuple[TextRange, AttributeSet]] = []
        start = 0
        chars = self._chars
        for i in range(1, len(chars) + 1):
            if i == len(chars) or chars[i] != chars[start]:
                result.append((TextRange(start, i), chars[start]))
                start = i
        return result

    def value_at(self, index: int, key: str, default: Any = None) -> Any:
        """Resolved value of one key at index."""
        return self.attributes_at(index).get(key, default)

    def __iter__(self) -> Iterator[tuple[str, AttributeSet]]:
        """Iterate ``(character, attributes)`` pairs."""
        return zip(self._text, self._chars, strict=True)

    def __len__(self) -> int:
        return len(self._text)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AttributedText):
            return NotImplemented
        return self._text == other._text and self._chars == other._chars

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"AttributedText({self._text!r}, runs={len(self.runs())})"


def resolve_attributes(
    text: str,
    base_attributes: Mapping[str, Any] | None,
    entries: Iterable[RangeEntry],
) -> AttributedText:
    """Resolve entries over text into an AttributedText."""
    return apply_entries(AttributedText(), text, base_attributes or EMPTY_ATTRIBUTES, entries)
