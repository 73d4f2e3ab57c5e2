"""call-boundary: reentrancy-scoped enter/exit hooks around a call stack.

A :class:`Boundary` runs its enter-hook once per outermost call, lets
nested calls pass straight through, and runs its exit-hook once when the
outermost call unwinds.
"""

import logging

from call_boundary.core.boundary import Boundary
from call_boundary.core.models import (
    BoundaryEvent,
    BoundaryOptions,
    EventKind,
    ExitInfo,
    Phase,
)
from call_boundary.exceptions import BoundaryError, CannotEnterError
from call_boundary.trace import BoundaryTrace, format_trace, render_trace
from call_boundary.version import __version__

logging.getLogger("call_boundary").addHandler(logging.NullHandler())

__all__: list[str] = [
    "Boundary",
    "BoundaryError",
    "BoundaryEvent",
    "BoundaryOptions",
    "BoundaryTrace",
    "CannotEnterError",
    "EventKind",
    "ExitInfo",
    "Phase",
    "__version__",
    "format_trace",
    "render_trace",
]
