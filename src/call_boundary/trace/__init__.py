"""Trace layer: recording and rendering boundary lifecycle events.

This package may import from ``core`` and ``utils``; ``core`` never
imports from here.  Rich is imported lazily so recording works without
it.
"""

from call_boundary.trace.recorder import BoundaryTrace
from call_boundary.trace.render import format_trace, render_trace

__all__: list[str] = [
    "BoundaryTrace",
    "format_trace",
    "render_trace",
]
