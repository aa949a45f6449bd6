"""StyleBuilder: layered styling over one immutable text.

The builder owns a text, a base attribute set and an ordered list of
RangeEntry layers. Markup elements become layers at their nesting level;
every detection-based styling call then adds its layers one level above
everything before it, so later calls win on conflicting keys.

Example:
    >>> builder = (
    ...     StyleBuilder.from_markup("<b>Hi</b> #rust", tags={"b": {"bold": True}})
    ...     .style_hashtags({"color": "blue"})
    ...     .style_base({"font": "Body"})
    ... )
    >>> builder.text
    'Hi #rust'
    >>> dict(builder.resolve().attributes_at(4))
    {'font': 'Body', 'color': 'blue'}

Thread Safety:
A builder is mutable and not safe for concurrent mutation. Serialize
styling calls externally if a builder is shared.

"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping, Sequence
from typing import TYPE_CHECKING, Any, Self, overload

from tinct.attributes import EMPTY_ATTRIBUTES, AttributeSet, freeze_attributes
from tinct.config import StyleConfig, get_style_config
from tinct.context import (
    DetectionContext,
    StyleSource,
    TagContext,
    apply_style,
    to_style_function,
)
from tinct.detectors import DetectionType, detect_regex, detect_types, run_detector
from tinct.errors import DetectionError
from tinct.markup import parse_markup
from tinct.model import AttributedText, RangeEntry, apply_entries
from tinct.ranges import TextRange
from tinct.utils.logger import get_logger

if TYPE_CHECKING:
    from tinct.renderers.protocol import RenderSink

logger = get_logger(__name__)


class StyleBuilder:
    """Fluent builder accumulating styling layers over a text.

    Usage:
        >>> builder = StyleBuilder("see #rust now")
        >>> builder.style_regex(r"#\\w+", {"color": "red"}).entries[0].range
        TextRange(start=4, end=9)

    """

    __slots__ = ("_base_attributes", "_config", "_current_max_level", "_entries", "_text")

    def __init__(
        self,
        text: str,
        base_attributes: Mapping[str, Any] | None = None,
        *,
        entries: Iterable[RangeEntry] = (),
        config: StyleConfig | None = None,
    ) -> None:
        """Initialize builder.

        Args:
            text: The text to style; never changes afterwards
            base_attributes: Attributes applied to the whole text below every layer
            entries: Initial layers
            config: Styling configuration (uses the active context config if None)

        Raises:
            InvalidRangeError: If an initial entry does not fit text
        """
        self._text = text
        self._base_attributes = freeze_attributes(base_attributes)
        self._config = config or get_style_config()
        self._entries: list[RangeEntry] = []
        for entry in entries:
            entry.range.check(len(text))
            self._entries.append(entry)
        self._current_max_level = max((e.level for e in self._entries), default=0)

    @classmethod
    def from_markup(
        cls,
        markup: str,
        tags: Mapping[str, StyleSource] | None = None,
        base_attributes: Mapping[str, Any] | None = None,
        *,
        config: StyleConfig | None = None,
    ) -> StyleBuilder:
        """Create a builder from markup.

        Tags are stripped; every element whose lowercased name has a style
        in ``tags`` becomes a layer at its nesting level. Elements without a
        style still count towards nesting. Later detection calls land above
        the deepest element.

        Args:
            markup: Markup string
            tags: Style per tag name (names are matched case-insensitively)
            base_attributes: Attributes applied to the whole text
            config: Styling configuration (uses the active context config if None)
        """
        config = config or get_style_config()
        styles = {name.lower(): to_style_function(style) for name, style in (tags or {}).items()}
        parsed = parse_markup(markup, config=config)

        entries: list[RangeEntry] = []
        for info in parsed.tags:
            style = styles.get(info.tag.key)
            if style is None:
                continue
            context = TagContext(tag=info.tag, outer_tags=info.outer_tags, info=info)
            entries.append(RangeEntry(apply_style(style, context), info.range, info.level))

        builder = cls(parsed.text, base_attributes, entries=entries, config=config)
        builder._current_max_level = parsed.max_level
        logger.debug(
            "Parsed markup: %d element(s), %d styled, max level %d",
            len(parsed.tags),
            len(entries),
            parsed.max_level,
        )
        return builder

    @classmethod
    def from_attributed(
        cls,
        attributed: AttributedText,
        base_attributes: Mapping[str, Any] | None = None,
        *,
        config: StyleConfig | None = None,
    ) -> StyleBuilder:
        """Create a builder from already styled text.

        Each run of the attributed text becomes a level-0 layer, so it sits
        below anything styled afterwards.
        """
        entries = [RangeEntry(attrs, span, 0) for span, attrs in attributed.runs() if attrs]
        return cls(attributed.text, base_attributes, entries=entries, config=config)

    # State

    @property
    def text(self) -> str:
        return self._text

    @property
    def base_attributes(self) -> AttributeSet:
        return self._base_attributes

    @property
    def entries(self) -> tuple[RangeEntry, ...]:
        """Layers in insertion order."""
        return tuple(self._entries)

    @property
    def current_max_level(self) -> int:
        return self._current_max_level

    @property
    def config(self) -> StyleConfig:
        return self._config

    # Styling

    def style_base(self, attributes: Mapping[str, Any] | None) -> Self:
        """Replace the base attributes."""
        self._base_attributes = freeze_attributes(attributes)
        return self

    def style_hashtags(self, style: StyleSource) -> Self:
        return self._style_detected(DetectionType.HASHTAG, style)

    def style_mentions(self, style: StyleSource) -> Self:
        return self._style_detected(DetectionType.MENTION, style)

    def style_links(self, style: StyleSource) -> Self:
        return self._style_detected(DetectionType.LINK, style)

    def style_emails(self, style: StyleSource) -> Self:
        return self._style_detected(DetectionType.EMAIL, style)

    def style_phone_numbers(self, style: StyleSource) -> Self:
        return self._style_detected(DetectionType.PHONE_NUMBER, style)

    def style_types(self, types: DetectionType, style: StyleSource) -> Self:
        """Style everything the detectors selected by ``types`` find.

        All ranges share one level.
        """
        ranges = detect_types(self._text, types, self._config.detectors)
        return self.style_ranges(ranges, style)

    def style_regex(
        self,
        pattern: str | re.Pattern[str],
        style: StyleSource,
        flags: int = 0,
    ) -> Self:
        """Style every non-empty match of pattern.

        Raises:
            DetectionError: If pattern does not compile; the builder is unchanged
        """
        return self.style_ranges(detect_regex(self._text, pattern, flags), style)

    @overload
    def style_range(self, range: TextRange, style: StyleSource) -> Self: ...
    @overload
    def style_range(self, range: tuple[int, int], style: StyleSource) -> Self: ...

    def style_range(self, range: TextRange | tuple[int, int], style: StyleSource) -> Self:
        """Style a single range."""
        return self.style_ranges([range], style)

    def style_ranges(self, ranges: Sequence[TextRange | tuple[int, int]], style: StyleSource) -> Self:
        """Style each range with style, all at one new level.

        The level is one above the current maximum, even when ranges is
        empty. Nothing is recorded unless every range is valid and every
        style call succeeds.

        Raises:
            InvalidRangeError: If a range does not fit the text
            StyleError: If the style function does not return a mapping
        """
        style_fn = to_style_function(style)
        level = self._current_max_level + 1
        length = len(self._text)

        added: list[RangeEntry] = []
        for item in ranges:
            span = item if isinstance(item, TextRange) else TextRange.from_span(item)
            span.check(length)
            context = DetectionContext(
                range=span,
                text=self._text[span.slice()],
                existing_attributes=self._covering_attributes(span),
            )
            added.append(RangeEntry(apply_style(style_fn, context), span, level))

        self._entries.extend(added)
        self._current_max_level = level
        logger.debug("Styled %d range(s) at level %d", len(added), level)
        return self

    def _style_detected(self, kind: DetectionType, style: StyleSource) -> Self:
        detector = self._config.detector_for(kind)
        if detector is None:
            raise DetectionError(kind.name or str(kind), "no detector registered")
        return self.style_ranges(run_detector(detector, self._text, name=kind.name), style)

    def _covering_attributes(self, span: TextRange) -> tuple[AttributeSet, ...]:
        return tuple(entry.attributes for entry in self._entries if entry.range.covers(span))

    # Resolution

    @overload
    def resolve(self) -> AttributedText: ...
    @overload
    def resolve[T](self, sink: RenderSink[T]) -> T: ...

    def resolve(self, sink: Any = None) -> Any:
        """Resolve all layers over the text.

        Does not change the builder; repeated calls give equal results.

        Args:
            sink: Consumer of the resolved styling (AttributedText if None)

        Returns:
            Whatever the sink's ``finish`` returns
        """
        if sink is None:
            sink = AttributedText()
        return apply_entries(sink, self._text, self._base_attributes or EMPTY_ATTRIBUTES, self._entries)

    def __repr__(self) -> str:
        return (
            f"StyleBuilder({self._text!r}, entries={len(self._entries)}, "
            f"max_level={self._current_max_level})"
        )
