"""RenderSink protocol: stable interface for resolved-styling consumers.

Resolution drives a sink in a fixed order: ``begin`` once with the text and
base attributes, ``add_attributes`` once per non-empty layer in ascending
level order, then ``finish`` to obtain the sink's product. Applying an
attribute set overrides the keys it defines inside its range and leaves
every other key alone.

The built-in ``AttributedText`` is the reference implementation.

Example:
    from tinct.renderers.protocol import RenderSink

    def render_with(sink: RenderSink[T], builder: StyleBuilder) -> T:
        return builder.resolve(sink)

"""

from typing import Protocol

from tinct.attributes import AttributeSet
from tinct.ranges import TextRange


class RenderSink[T](Protocol):
    """Protocol for consumers of resolved styling."""

    def begin(self, text: str, base_attributes: AttributeSet) -> None:
        """Start a new result over text with base attributes everywhere."""
        ...

    def add_attributes(self, attributes: AttributeSet, span: TextRange) -> None:
        """Layer attributes over span, overriding keys they define."""
        ...

    def finish(self) -> T:
        """Return the finished product."""
        ...
