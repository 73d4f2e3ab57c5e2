"""Execution-slot implementations.

A slot answers one question for a boundary: "which outermost call, if
any, is the current call stack inside?"

* :class:`InstanceSlot`: one plain attribute per boundary.  Every
  caller of the boundary shares it, which is correct for a single
  logical call stack.
* :class:`ContextSlot`: one :class:`contextvars.ContextVar` per
  boundary.  Each thread, and each asyncio task (which copies the
  context it was created in), sees its own value, so independent call
  stacks cannot corrupt each other's state.  No locks are involved.
"""

from __future__ import annotations

import contextvars
import itertools
from typing import Generic, TypeVar

from call_boundary.core.models import Scope, _Execution
from call_boundary.exceptions import ConfigurationError

E = TypeVar("E")

_slot_ids = itertools.count()


def _live(execution: _Execution[E] | None) -> _Execution[E] | None:
    """Treat a record whose outermost call has left as an empty slot."""
    if execution is None or not execution.active:
        return None
    return execution


class InstanceSlot(Generic[E]):
    """Slot backed by a single instance attribute."""

    __slots__ = ("_execution",)

    def __init__(self) -> None:
        self._execution: _Execution[E] | None = None

    def get(self) -> _Execution[E] | None:
        return _live(self._execution)

    def set(self, execution: _Execution[E]) -> _Execution[E] | None:
        previous = self._execution
        self._execution = execution
        return previous

    def reset(self, token: _Execution[E] | None) -> None:
        self._execution = token


class ContextSlot(Generic[E]):
    """Slot backed by a per-boundary :class:`contextvars.ContextVar`."""

    __slots__ = ("_var",)

    def __init__(self, name: str = "boundary") -> None:
        # Each slot needs its own variable; two boundaries must never
        # share "inside" state.
        self._var: contextvars.ContextVar[_Execution[E] | None] = contextvars.ContextVar(
            f"call_boundary.{name}.{next(_slot_ids)}", default=None,
        )

    def get(self) -> _Execution[E] | None:
        return _live(self._var.get())

    def set(self, execution: _Execution[E]) -> contextvars.Token[_Execution[E] | None]:
        return self._var.set(execution)

    def reset(self, token: contextvars.Token[_Execution[E] | None]) -> None:
        self._var.reset(token)


def make_slot(scope: Scope, name: str = "boundary") -> InstanceSlot[E] | ContextSlot[E]:
    """Build the slot for *scope*.

    Raises
    ------
    ConfigurationError
        If *scope* is not ``"instance"`` or ``"context"``.
    """
    if scope == "instance":
        return InstanceSlot()
    if scope == "context":
        return ContextSlot(name)
    raise ConfigurationError(
        f"Unknown boundary scope: {scope!r}",
        hint="Use scope='instance' or scope='context'.",
    )
