"""Character ranges over an immutable text.

Ranges are half-open ``[start, end)`` and count code points, so they stay
valid for any operation that leaves the text itself unchanged.

Thread Safety:
TextRange is frozen (immutable) and safe to share across threads.

"""

from __future__ import annotations

from dataclasses import dataclass

from tinct.errors import InvalidRangeError


@dataclass(frozen=True, slots=True, order=True)
class TextRange:
    """Half-open character range ``[start, end)``.

    Attributes:
        start: First character offset (inclusive)
        end: End offset (exclusive)

    Examples:
        >>> r = TextRange(4, 9)
        >>> "see #rust now"[r.slice()]
        '#rust'
        >>> len(r)
        5

    Raises:
        InvalidRangeError: If start is negative or start > end

    """

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0 or self.start > self.end:
            raise InvalidRangeError(self.start, self.end)

    def __len__(self) -> int:
        return self.end - self.start

    def __str__(self) -> str:
        return f"[{self.start}, {self.end})"

    @classmethod
    def whole(cls, text: str) -> TextRange:
        """Range covering all of text."""
        return cls(0, len(text))

    @classmethod
    def from_span(cls, span: tuple[int, int]) -> TextRange:
        """Create from a ``(start, end)`` pair such as ``re.Match.span()``."""
        return cls(span[0], span[1])

    @property
    def is_empty(self) -> bool:
        return self.start == self.end

    def slice(self) -> slice:
        """Return a slice object for indexing the text."""
        return slice(self.start, self.end)

    def check(self, length: int) -> TextRange:
        """Validate this range against a text of the given length.

        Args:
            length: Length of the text the range must fit in

        Returns:
            self, for chaining

        Raises:
            InvalidRangeError: If the range extends past length
        """
        if self.end > length:
            raise InvalidRangeError(self.start, self.end, length)
        return self

    def clamped(self, limits: TextRange) -> TextRange:
        """Clamp this range to limits.

        A range that does not touch limits collapses to an empty range at
        the nearest limit bound.
        """
        start = min(max(self.start, limits.start), limits.end)
        end = max(min(self.end, limits.end), start)
        return TextRange(start, end)

    def covers(self, other: TextRange) -> bool:
        """True if clamping this range to other gives other back.

        For a non-empty other this means other lies entirely within this
        range. An empty other is covered by every range, since clamping
        collapses onto it.
        """
        return self.clamped(other) == other

    def overlaps(self, other: TextRange) -> bool:
        """True if the ranges share at least one character."""
        return self.start < other.end and other.start < self.end
