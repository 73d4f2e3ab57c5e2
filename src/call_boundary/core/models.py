"""Value objects shared by the boundary, its slots, and its listeners.

Everything here is a plain dataclass or enum with no behaviour beyond
data access, except :class:`_Execution`, which is the one mutable
record a boundary owns while a call is inside it.
"""

from __future__ import annotations

import enum
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, Literal, TypeVar

if TYPE_CHECKING:
    from call_boundary.core.protocols import BoundaryListener

E = TypeVar("E")

Scope = Literal["instance", "context"]


# ---------------------------------------------------------------------------
# State machine
# ---------------------------------------------------------------------------

class Phase(enum.Enum):
    """Where an outermost call currently is in its lifecycle."""

    IDLE = "idle"
    ENTERING_HOOK = "entering_hook"
    IN_WORK = "in_work"
    EXITING_HOOK = "exiting_hook"


class EventKind(enum.Enum):
    """Lifecycle events reported to listeners and the debug log."""

    ENTER = "enter"
    """An outermost call started; the enter-hook (if any) is about to run."""

    ENTER_FAILED = "enter_failed"
    """The enter-hook raised; the call returns to idle without work or exit."""

    WORK = "work"
    """The wrapped work is about to run."""

    WORK_FAILED = "work_failed"
    """The wrapped work raised; the fault is held for the exit-hook."""

    EXIT = "exit"
    """The execution slot was cleared; the exit-hook (if any) is about to run."""

    EXIT_FAULT_DISCARDED = "exit_fault_discarded"
    """The exit-hook raised while an unclaimed work fault was outstanding."""

    LEAVE = "leave"
    """The outermost call is returning or re-raising."""

    NESTED = "nested"
    """A nested call passed straight through to its work."""

    REJECTED = "rejected"
    """A nested call arrived while the enter-hook was still running."""


@dataclass(frozen=True, slots=True)
class BoundaryEvent:
    """One entry in a boundary's lifecycle."""

    boundary: str
    """Name of the boundary that emitted the event."""

    kind: EventKind

    phase: Phase
    """Phase of the outermost call after the event."""

    fault_type: str | None = None
    """Class name of the fault involved, if any."""


# ---------------------------------------------------------------------------
# Execution record
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class _Execution(Generic[E]):
    """The record stored in a slot for the extent of one outermost call.

    Keeping the result and the in-hook flag on one object means
    "entered" and "has a result" can never disagree: the slot is either
    empty or holds exactly one of these.

    ``active`` is cleared when the outermost call leaves.  Contexts copied
    while the call was running (asyncio tasks, ``copy_context()``) keep
    the record, so slots must report an inactive record as empty.
    """

    enter_result: E | None = None
    in_enter_hook: bool = False
    active: bool = True


# ---------------------------------------------------------------------------
# Exit-hook input
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ExitInfo(Generic[E]):
    """Input handed to the exit-hook, built fresh for every outermost call."""

    enter_result: E | None
    """What the enter-hook returned, or ``None`` without an enter-hook."""

    fault_occurred: bool
    """``True`` iff the wrapped work raised."""

    retrieve_fault: Callable[[], BaseException | None]
    """Return the work's fault and claim it.

    A claimed fault is not re-raised from ``enter``.  Re-raise it from
    the exit-hook to propagate it deliberately.
    """


# ---------------------------------------------------------------------------
# Construction options
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class BoundaryOptions(Generic[E]):
    """Everything a :class:`~call_boundary.core.boundary.Boundary` can be built from."""

    on_enter: Callable[[], E] | None = None
    on_exit: Callable[[ExitInfo[E]], Any] | None = None

    scope: Scope = "instance"
    """``"instance"`` shares one slot per boundary; ``"context"`` keeps
    one per thread / asyncio task via :mod:`contextvars`."""

    listener: BoundaryListener | None = None
    name: str = "boundary"
