"""Contexts handed to style functions.

A style function receives one of two context shapes and returns the
attribute set to apply:

- TagContext: a markup element, plus the chain of elements enclosing it
- DetectionContext: a detected range, its text, and the attribute sets of
  earlier layers that fully cover it

Anywhere a style function is accepted, a plain mapping is accepted too and
means "always these attributes".

Example:
    >>> def link_style(ctx: StyleContext) -> AttributeSet:
    ...     match ctx:
    ...         case TagContext(tag=tag):
    ...             return {"link": tag.attributes.get("href", "")}
    ...         case DetectionContext(text=text):
    ...             return {"link": text}

Thread Safety:
All context types are frozen and safe to share across threads.

"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from tinct.attributes import AttributeSet, freeze_attributes
from tinct.errors import StyleError
from tinct.ranges import TextRange


@dataclass(frozen=True, slots=True)
class Tag:
    """A markup element: its name as written and its attributes.

    Attribute names are lowercased; values are entity-decoded.

    """

    name: str
    attributes: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    @property
    def key(self) -> str:
        """Lowercased name used for style lookup."""
        return self.name.lower()


@dataclass(frozen=True, slots=True)
class TagInfo:
    """One parsed markup element positioned against the stripped text.

    Attributes:
        tag: The element
        range: Characters of the stripped text the element covers
        level: Nesting depth; an element at the root has level 1
        outer_tags: Enclosing elements, outermost first

    """

    tag: Tag
    range: TextRange
    level: int
    outer_tags: tuple[Tag, ...] = ()


@dataclass(frozen=True, slots=True)
class TagContext:
    """Context for styling a markup element."""

    tag: Tag
    outer_tags: tuple[Tag, ...]
    info: TagInfo | None = None


@dataclass(frozen=True, slots=True)
class DetectionContext:
    """Context for styling a detected range.

    Attributes:
        range: The detected range
        text: The detected text
        existing_attributes: Attribute sets of earlier layers whose range
            fully covers this one, in the order they were added

    """

    range: TextRange
    text: str
    existing_attributes: tuple[AttributeSet, ...] = ()


type StyleContext = TagContext | DetectionContext
type StyleFunction = Callable[[StyleContext], Mapping[str, Any]]
type StyleSource = StyleFunction | Mapping[str, Any]


def to_style_function(style: StyleSource) -> StyleFunction:
    """Normalize a style source into a style function.

    Raises:
        StyleError: If style is neither callable nor a mapping
    """
    if isinstance(style, Mapping):
        frozen = freeze_attributes(style)
        return lambda _ctx: frozen
    if callable(style):
        return style
    msg = f"style must be a mapping or a callable, got {type(style).__name__}"
    raise StyleError(msg)


def apply_style(style: StyleFunction, context: StyleContext) -> AttributeSet:
    """Call a style function and freeze its result.

    Raises:
        StyleError: If the function does not return a mapping
    """
    result = style(context)
    if result is None or isinstance(result, Mapping):
        return freeze_attributes(result)
    msg = f"style function returned {type(result).__name__}, expected a mapping"
    raise StyleError(msg)
