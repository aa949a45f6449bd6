"""RenderSink producing ``rich.text.Text``.

Requires the optional ``rich`` extra (``pip install tinct[rich]``).

Attribute sets are converted to ``rich.style.Style`` by a converter
function. The default converter understands a small vocabulary:
``color``, ``bgcolor``, ``bold``, ``italic``, ``underline``, ``strike``,
``dim``, ``reverse``, ``link`` and ``style`` (a rich style string or Style
used as the starting point). Other keys are ignored. Pass your own
converter to map a different vocabulary.

rich layers spans in the order they are added and combines styles by
overriding only the properties a later style sets, which is the same
override-union rule the core uses.

Example:
    >>> from tinct import StyleBuilder
    >>> builder = StyleBuilder("see #rust now").style_hashtags({"color": "blue"})
    >>> text = builder.resolve(RichSink())
    >>> text.plain
    'see #rust now'

"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from rich.style import Style
from rich.text import Text

from tinct.attributes import AttributeSet
from tinct.ranges import TextRange

_FLAG_KEYS = ("bold", "italic", "underline", "strike", "dim", "reverse")


def to_rich_style(attributes: AttributeSet) -> Style:
    """Convert an attribute set to a rich Style using the default vocabulary."""
    base = attributes.get("style")
    kwargs: dict[str, Any] = {}
    if "color" in attributes:
        kwargs["color"] = attributes["color"]
    if "bgcolor" in attributes:
        kwargs["bgcolor"] = attributes["bgcolor"]
    if "link" in attributes:
        kwargs["link"] = attributes["link"]
    for key in _FLAG_KEYS:
        if key in attributes:
            kwargs[key] = bool(attributes[key])

    style = Style(**kwargs)
    if base is None:
        return style
    return Style.parse(base) + style if isinstance(base, str) else base + style


class RichSink:
    """Builds a ``rich.text.Text`` from resolved styling.

    Each call to ``begin`` starts a fresh Text, so one sink can be reused
    for several resolutions.

    """

    __slots__ = ("_converter", "_end", "_text")

    def __init__(
        self,
        converter: Callable[[AttributeSet], Style | str] = to_rich_style,
        *,
        end: str = "\n",
    ) -> None:
        """Initialize sink.

        Args:
            converter: Maps an attribute set to a rich style
            end: ``end`` passed to the Text
        """
        self._converter = converter
        self._end = end
        self._text = Text(end=end)

    def begin(self, text: str, base_attributes: AttributeSet) -> None:
        base_style = self._converter(base_attributes) if base_attributes else ""
        self._text = Text(text, style=base_style, end=self._end)

    def add_attributes(self, attributes: AttributeSet, span: TextRange) -> None:
        self._text.stylize(self._converter(attributes), span.start, span.end)

    def finish(self) -> Text:
        return self._text
