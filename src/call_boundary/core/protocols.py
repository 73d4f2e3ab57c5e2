"""Protocols (interfaces) consumed by the core layer.

The boundary depends only on these structural contracts; any object
with the right methods satisfies them without inheriting from anything.
"""

from __future__ import annotations

from typing import Any, Protocol, TypeVar

from call_boundary.core.models import BoundaryEvent, _Execution

E = TypeVar("E")


class ExecutionSlot(Protocol[E]):
    """Storage for the execution record of the current outermost call.

    :meth:`set` returns an opaque token; passing it to :meth:`reset`
    restores whatever the slot held before.
    """

    def get(self) -> _Execution[E] | None:
        """Return the current execution record, or ``None`` when idle."""
        ...  # pragma: no cover

    def set(self, execution: _Execution[E]) -> Any:
        """Store *execution* and return a token for :meth:`reset`."""
        ...  # pragma: no cover

    def reset(self, token: Any) -> None:
        """Undo the :meth:`set` call that produced *token*."""
        ...  # pragma: no cover


class BoundaryListener(Protocol):
    """Receives every lifecycle event a boundary emits.

    Implementations must not raise: a listener fault is not isolated
    and surfaces through ``enter`` like any other fault.
    """

    def on_event(self, event: BoundaryEvent) -> None:
        ...  # pragma: no cover
