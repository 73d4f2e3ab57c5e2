"""Core layer: the boundary state machine and its value objects.

Rules
-----
* No imports from ``trace``.
* No handler configuration; log through module loggers only.
* User faults are never wrapped or swallowed.
"""

from call_boundary.core.boundary import Boundary
from call_boundary.core.models import (
    BoundaryEvent,
    BoundaryOptions,
    EventKind,
    ExitInfo,
    Phase,
)
from call_boundary.core.protocols import BoundaryListener, ExecutionSlot
from call_boundary.core.slots import ContextSlot, InstanceSlot

__all__: list[str] = [
    "Boundary",
    "BoundaryEvent",
    "BoundaryListener",
    "BoundaryOptions",
    "ContextSlot",
    "EventKind",
    "ExecutionSlot",
    "ExitInfo",
    "InstanceSlot",
    "Phase",
]
