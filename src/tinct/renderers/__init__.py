"""Render sinks for Tinct.

- protocol.RenderSink: the interface resolution drives
- tinct.model.AttributedText: built-in, dependency-free sink
- rich.RichSink: ``rich.text.Text`` output (optional ``rich`` extra)

``RichSink`` is not imported here so the core stays importable without rich.
"""

from tinct.renderers.protocol import RenderSink

__all__ = [
    "RenderSink",
]
