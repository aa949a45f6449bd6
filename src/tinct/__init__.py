"""
Tinct: layered rich-text styling for Python

Describe which style attributes apply to which characters as a stack of
layers, from markup tags and from pattern detectors, then resolve the stack
into one attribute set per character. Zero runtime dependencies.

Quick Start:
    >>> from tinct import style_tags
    >>> builder = style_tags(
    ...     "<b>bold <i>both</i></b> #tagged",
    ...     {"b": {"bold": True}, "i": {"italic": True}},
    ... ).style_hashtags({"color": "blue"})
    >>> builder.text
    'bold both #tagged'
    >>> result = builder.resolve()
    >>> dict(result.attributes_at(6))
    {'bold': True, 'italic': True}

Style functions see context:
    >>> def link(ctx):
    ...     return {"link": ctx.tag.attributes.get("href", "")}
    >>> style_tags('<a href="https://x.org">x</a>', {"a": link}).entries[0].attributes["link"]
    'https://x.org'

Installation:
    pip install tinct              # Core (zero deps)
    pip install tinct[rich]        # + rich.text.Text output via RichSink
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from tinct.attributes import EMPTY_ATTRIBUTES, AttributeSet, freeze_attributes, merge_attributes
from tinct.builder import StyleBuilder
from tinct.config import (
    StyleConfig,
    get_style_config,
    reset_style_config,
    set_style_config,
    style_config_context,
)
from tinct.context import (
    DetectionContext,
    StyleContext,
    StyleFunction,
    StyleSource,
    Tag,
    TagContext,
    TagInfo,
)
from tinct.detectors import (
    BUILTIN_DETECTORS,
    DetectionType,
    Detector,
    detect_emails,
    detect_hashtags,
    detect_links,
    detect_mentions,
    detect_phone_numbers,
    detect_regex,
    detect_types,
)
from tinct.entities import (
    DEFAULT_ENTITIES,
    DefaultEntityTable,
    EntityTable,
    MappingEntityTable,
    decode_entities,
)
from tinct.errors import DetectionError, InvalidRangeError, StyleError, TinctError
from tinct.markup import ParsedMarkup, contains_markup, parse_markup
from tinct.model import AttributedText, RangeEntry, apply_entries, resolve_attributes
from tinct.ranges import TextRange
from tinct.renderers.protocol import RenderSink

__version__ = "0.1.0"


def style_tags(
    markup: str,
    tags: Mapping[str, StyleSource] | None = None,
    *,
    config: StyleConfig | None = None,
) -> StyleBuilder:
    """Start a builder from markup, styling the given tags."""
    return StyleBuilder.from_markup(markup, tags, config=config)


def style_base(text: str, attributes: Mapping[str, Any]) -> StyleBuilder:
    """Start a builder over plain text with base attributes."""
    return StyleBuilder(text, attributes)


def style_hashtags(text: str, style: StyleSource) -> StyleBuilder:
    return StyleBuilder(text).style_hashtags(style)


def style_mentions(text: str, style: StyleSource) -> StyleBuilder:
    return StyleBuilder(text).style_mentions(style)


def style_links(text: str, style: StyleSource) -> StyleBuilder:
    return StyleBuilder(text).style_links(style)


def style_phone_numbers(text: str, style: StyleSource) -> StyleBuilder:
    return StyleBuilder(text).style_phone_numbers(style)


def style_regex(
    text: str,
    pattern: str | re.Pattern[str],
    style: StyleSource,
    flags: int = 0,
) -> StyleBuilder:
    return StyleBuilder(text).style_regex(pattern, style, flags)


def style_types(text: str, types: DetectionType, style: StyleSource) -> StyleBuilder:
    return StyleBuilder(text).style_types(types, style)


def style_range(text: str, range: TextRange | tuple[int, int], style: StyleSource) -> StyleBuilder:
    return StyleBuilder(text).style_range(range, style)


def render_markup(
    markup: str,
    tags: Mapping[str, StyleSource] | None = None,
    base_attributes: Mapping[str, Any] | None = None,
    *,
    sink: RenderSink[Any] | None = None,
    config: StyleConfig | None = None,
) -> Any:
    """Parse, style and resolve markup in one call.

    Plain text (no markup detected) skips the tag parser, so literal
    ``&`` sequences in it are left alone.

    Args:
        markup: Markup or plain text
        tags: Style per tag name
        base_attributes: Attributes applied to the whole text
        sink: Consumer of the result (AttributedText if None)
        config: Styling configuration

    Returns:
        The sink's product
    """
    if contains_markup(markup):
        builder = StyleBuilder.from_markup(markup, tags, base_attributes, config=config)
    else:
        builder = StyleBuilder(markup, base_attributes, config=config)
    return builder.resolve(sink)


__all__ = [  # noqa: RUF022 - grouped by category for maintainability
    # Version
    "__version__",
    # Builder and string-level entry points
    "StyleBuilder",
    "render_markup",
    "style_base",
    "style_hashtags",
    "style_links",
    "style_mentions",
    "style_phone_numbers",
    "style_range",
    "style_regex",
    "style_tags",
    "style_types",
    # Model
    "AttributeSet",
    "AttributedText",
    "EMPTY_ATTRIBUTES",
    "RangeEntry",
    "TextRange",
    "apply_entries",
    "freeze_attributes",
    "merge_attributes",
    "resolve_attributes",
    # Markup
    "ParsedMarkup",
    "Tag",
    "TagInfo",
    "contains_markup",
    "parse_markup",
    # Entities
    "DEFAULT_ENTITIES",
    "DefaultEntityTable",
    "EntityTable",
    "MappingEntityTable",
    "decode_entities",
    # Style functions
    "DetectionContext",
    "StyleContext",
    "StyleFunction",
    "StyleSource",
    "TagContext",
    # Detectors
    "BUILTIN_DETECTORS",
    "DetectionType",
    "Detector",
    "detect_emails",
    "detect_hashtags",
    "detect_links",
    "detect_mentions",
    "detect_phone_numbers",
    "detect_regex",
    "detect_types",
    # Rendering
    "RenderSink",
    # Configuration (ContextVar-based)
    "StyleConfig",
    "get_style_config",
    "reset_style_config",
    "set_style_config",
    "style_config_context",
    # Errors
    "DetectionError",
    "InvalidRangeError",
    "StyleError",
    "TinctError",
]
