"""Markup tag parser.

Strips tags from a markup string and reports, for every element, the range
it covers in the stripped text, its nesting level and the elements
enclosing it. Text between tags is entity-decoded.

This is not an HTML parser: there is no document model, no implied end
tags and no validation. Malformed input never raises; it is recovered as
follows.

Recovery rules:
- A closing tag with no open element of the same name stays in the text
  as literal characters, unless it names a void element (``</br>``),
  in which case it is dropped.
- A ``<`` that does not start a well-formed tag or comment is literal.
- A closing tag closes the innermost open element with the same name even
  when other elements were opened after it; those stay open, so element
  ranges may overlap.
- Elements still open at the end of the input end at the end of the text.

Example:
    >>> parsed = parse_markup("<b>bold <i>both</i></b>")
    >>> parsed.text
    'bold both'
    >>> [(t.tag.name, str(t.range), t.level) for t in parsed.tags]
    [('b', '[0, 9)', 1), ('i', '[5, 9)', 2)]

Thread Safety:
Each call builds its own scanner. ParsedMarkup is frozen.

"""

from __future__ import annotations

import re
from dataclasses import dataclass
from types import MappingProxyType

from tinct.config import StyleConfig, get_style_config
from tinct.context import Tag, TagInfo
from tinct.entities import decode_entities
from tinct.ranges import TextRange
from tinct.utils.logger import get_logger

logger = get_logger(__name__)

# Tag name: ASCII letter followed by letters, digits, hyphens, colons
_TAG_NAME_RE = re.compile(r"[a-zA-Z][a-zA-Z0-9:\-]*")

# Attribute name: [a-zA-Z_:][a-zA-Z0-9_.:-]*
_ATTR_NAME_RE = re.compile(r"[a-zA-Z_:][a-zA-Z0-9_.:\-]*")

_WHITESPACE = " \t\n\r\f"

# Heuristic used to pick the markup path for arbitrary strings
_CONTAINS_MARKUP_RE = re.compile(
    r"<!--.*?-->"
    r"|<!DOCTYPE[^>]*>"
    r"|<(?:script|style)\b.*?</(?:script|style)\s*>"
    r"|</?[a-zA-Z][a-zA-Z0-9\-]*(?:\s+[^<>]*?)?\s*/?>",
    re.IGNORECASE | re.DOTALL,
)


def contains_markup(text: str) -> bool:
    """Check whether text looks like it contains markup tags or comments.

    Example:
        >>> contains_markup("a <b>bold</b> move")
        True
        >>> contains_markup("1 < 2 and 3 > 2")
        False
    """
    return _CONTAINS_MARKUP_RE.search(text) is not None


@dataclass(frozen=True, slots=True)
class ParsedMarkup:
    """Result of parsing markup.

    Attributes:
        text: The stripped, entity-decoded text
        tags: One TagInfo per element, in order of appearance

    """

    text: str
    tags: tuple[TagInfo, ...]

    @property
    def max_level(self) -> int:
        """Deepest nesting level reached, 0 when there are no tags."""
        return max((t.level for t in self.tags), default=0)


@dataclass(frozen=True, slots=True)
class _RawTag:
    attributes: dict[str, str]
    self_closing: bool
    end: int


@dataclass(slots=True)
class _OpenElement:
    tag: Tag
    start: int
    level: int
    outer_tags: tuple[Tag, ...]
    slot: int


def _parse_attributes(source: str, pos: int, config: StyleConfig) -> _RawTag | None:
    """Parse the attribute list and end of an open tag.

    ``pos`` points just past the tag name. Returns None if the tag is not
    well formed, in which case the caller treats ``<`` as literal.
    """
    length = len(source)
    attributes: dict[str, str] = {}
    i = pos

    while i < length:
        char = source[i]

        if char == ">":
            return _RawTag(attributes, False, i + 1)

        if char == "/":
            if i + 1 < length and source[i + 1] == ">":
                return _RawTag(attributes, True, i + 2)
            return None

        if char in _WHITESPACE:
            i += 1
            continue

        # Attributes need whitespace before them
        if source[i - 1] not in _WHITESPACE:
            return None

        match = _ATTR_NAME_RE.match(source, i)
        if match is None:
            return None
        name = match.group(0).lower()
        i = match.end()

        while i < length and source[i] in _WHITESPACE:
            i += 1
        if i >= length:
            return None

        if source[i] != "=":
            # Boolean attribute
            attributes.setdefault(name, "")
            continue

        i += 1
        while i < length and source[i] in _WHITESPACE:
            i += 1
        if i >= length:
            return None

        quote = source[i]
        if quote in "\"'":
            close = source.find(quote, i + 1)
            if close == -1:
                return None
            raw_value = source[i + 1 : close]
            i = close + 1
        else:
            value_start = i
            while i < length and source[i] not in "\"'=<>`" and source[i] not in _WHITESPACE:
                i += 1
            if i == value_start:
                return None
            raw_value = source[value_start:i]

        attributes.setdefault(name, decode_entities(raw_value, config.entity_table))

    return None


class _TagScanner:
    """Single-pass scanner over one markup string."""

    __slots__ = (
        "_config",
        "_length",
        "_parts",
        "_pos",
        "_results",
        "_source",
        "_stack",
    )

    def __init__(self, source: str, config: StyleConfig) -> None:
        self._source = source
        self._config = config
        self._pos = 0
        self._parts: list[str] = []
        self._length = 0
        self._stack: list[_OpenElement] = []
        self._results: list[TagInfo | None] = []

    def scan(self) -> ParsedMarkup:
        source = self._source
        while self._pos < len(source):
            lt = source.find("<", self._pos)
            if lt == -1:
                self._append_text(source[self._pos :])
                break
            if lt > self._pos:
                self._append_text(source[self._pos : lt])
            self._pos = lt
            if not self._scan_markup():
                self._append_literal("<")
                self._pos = lt + 1

        self._close_remaining()
        tags = tuple(info for info in self._results if info is not None)
        return ParsedMarkup(text="".join(self._parts), tags=tags)

    # Output

    def _append_text(self, text: str) -> None:
        self._append_literal(decode_entities(text, self._config.entity_table))

    def _append_literal(self, text: str) -> None:
        if text:
            self._parts.append(text)
            self._length += len(text)

    # Markup constructs

    def _scan_markup(self) -> bool:
        """Consume the construct at ``<``; False if it is not markup."""
        source = self._source
        pos = self._pos
        if source.startswith("<!--", pos):
            return self._scan_comment()
        if source.startswith("</", pos):
            return self._scan_closing_tag()
        if pos + 1 < len(source) and source[pos + 1].isascii() and source[pos + 1].isalpha():
            return self._scan_opening_tag()
        return False

    def _scan_comment(self) -> bool:
        if not self._config.strip_comments:
            return False
        end = self._source.find("-->", self._pos + 4)
        if end == -1:
            return False
        self._pos = end + 3
        return True

    def _scan_closing_tag(self) -> bool:
        source = self._source
        match = _TAG_NAME_RE.match(source, self._pos + 2)
        if match is None:
            return False
        i = match.end()
        while i < len(source) and source[i] in _WHITESPACE:
            i += 1
        if i >= len(source) or source[i] != ">":
            return False
        end = i + 1

        key = match.group(0).lower()
        for depth in range(len(self._stack) - 1, -1, -1):
            if self._stack[depth].tag.key == key:
                element = self._stack.pop(depth)
                if depth != len(self._stack):
                    logger.debug(
                        "Closing <%s> past %d still-open element(s)",
                        element.tag.name,
                        len(self._stack) - depth,
                    )
                self._finish(element, self._length)
                break
        else:
            if key in self._config.void_tags:
                logger.debug("Closing tag for void element %r dropped", source[self._pos : end])
            else:
                logger.debug("Unmatched closing tag %r kept as text", source[self._pos : end])
                self._append_literal(source[self._pos : end])

        self._pos = end
        return True

    def _scan_opening_tag(self) -> bool:
        match = _TAG_NAME_RE.match(self._source, self._pos + 1)
        if match is None:
            return False
        raw = _parse_attributes(self._source, match.end(), self._config)
        if raw is None:
            return False

        name = match.group(0)
        key = name.lower()
        tag = Tag(name=name, attributes=MappingProxyType(raw.attributes))
        outer_tags = tuple(element.tag for element in self._stack)
        level = len(self._stack) + 1
        self._pos = raw.end

        slot = len(self._results)
        self._results.append(None)
        element = _OpenElement(tag=tag, start=self._length, level=level, outer_tags=outer_tags, slot=slot)

        if raw.self_closing or key in self._config.void_tags:
            self._append_literal(self._config.tag_replacements.get(key, ""))
            self._finish(element, self._length)
        else:
            self._stack.append(element)
        return True

    def _finish(self, element: _OpenElement, end: int) -> None:
        self._results[element.slot] = TagInfo(
            tag=element.tag,
            range=TextRange(element.start, end),
            level=element.level,
            outer_tags=element.outer_tags,
        )

    def _close_remaining(self) -> None:
        while self._stack:
            element = self._stack.pop()
            logger.debug("Unclosed <%s> ends at end of text", element.tag.name)
            self._finish(element, self._length)


def parse_markup(markup: str, *, config: StyleConfig | None = None) -> ParsedMarkup:
    """Parse markup into stripped text and positioned elements.

    Args:
        markup: Markup string
        config: Styling configuration (uses the active context config if None)

    Returns:
        ParsedMarkup with the stripped text and one TagInfo per element
    """
    return _TagScanner(markup, config or get_style_config()).scan()
