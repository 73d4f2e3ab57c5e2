"""In-memory recording of boundary lifecycle events."""

from __future__ import annotations

from collections.abc import Iterator

from call_boundary.core.models import BoundaryEvent, EventKind


class BoundaryTrace:
    """Listener that keeps every event it receives, in order.

    Pass it as ``listener=`` to one or more boundaries; events from all
    of them interleave in the order they happened.
    """

    def __init__(self) -> None:
        self._events: list[BoundaryEvent] = []

    def on_event(self, event: BoundaryEvent) -> None:
        self._events.append(event)

    @property
    def events(self) -> tuple[BoundaryEvent, ...]:
        return tuple(self._events)

    def kinds(self, boundary: str | None = None) -> list[EventKind]:
        """Return the recorded event kinds, optionally for one boundary only."""
        return [
            event.kind
            for event in self._events
            if boundary is None or event.boundary == boundary
        ]

    def clear(self) -> None:
        self._events.clear()

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[BoundaryEvent]:
        return iter(self._events)
