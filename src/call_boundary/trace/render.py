"""Render a recorded :class:`~call_boundary.trace.recorder.BoundaryTrace`.

:func:`render_trace` prints a Rich table to stderr, falling back to the
plain-text table from :func:`format_trace` when Rich is not installed.
"""

from __future__ import annotations

import sys
from collections.abc import Iterable
from typing import Any

from call_boundary.core.models import BoundaryEvent, EventKind
from call_boundary.exceptions import MissingDependencyError


# ---------------------------------------------------------------------------
# Row builders (pure)
# ---------------------------------------------------------------------------

_FAULT_KINDS: frozenset[EventKind] = frozenset(
    {
        EventKind.ENTER_FAILED,
        EventKind.WORK_FAILED,
        EventKind.EXIT_FAULT_DISCARDED,
        EventKind.REJECTED,
    },
)


def _rows(events: Iterable[BoundaryEvent]) -> list[tuple[str, str, str, str, str]]:
    """Return ``(#, boundary, event, phase, fault)`` rows for *events*."""
    return [
        (
            str(index + 1),
            event.boundary,
            event.kind.value,
            event.phase.value,
            event.fault_type or "—",
        )
        for index, event in enumerate(events)
    ]


def _event_markup(kind: EventKind) -> str:
    """Colour fault-related events for the Rich table."""
    if kind in _FAULT_KINDS:
        return f"[red]{kind.value}[/red]"
    if kind is EventKind.NESTED:
        return f"[dim]{kind.value}[/dim]"
    return kind.value


def _load_rich() -> tuple[type[Any], type[Any]]:
    """Import the Rich console and table classes lazily."""
    try:
        from rich.console import Console
        from rich.table import Table
    except ModuleNotFoundError as exc:
        raise MissingDependencyError(
            "rich is not installed. Install with: pip install rich",
        ) from exc
    return Console, Table


def _build_table(table_class: type[Any], events: list[BoundaryEvent], title: str) -> Any:
    table = table_class(
        title=title,
        show_header=True,
        header_style="bold cyan",
        border_style="dim",
    )
    table.add_column("#", justify="right", style="dim", width=4)
    table.add_column("Boundary", style="bold", min_width=10)
    table.add_column("Event", min_width=12)
    table.add_column("Phase", min_width=12)
    table.add_column("Fault", justify="left", min_width=8)

    for event, (index, boundary, _, phase, fault) in zip(events, _rows(events)):
        table.add_row(index, boundary, _event_markup(event.kind), phase, fault)
    return table


# ---------------------------------------------------------------------------
# Public entry points
# ---------------------------------------------------------------------------

def format_trace(events: Iterable[BoundaryEvent]) -> str:
    """Return *events* as a fixed-width plain-text table."""
    lines = [
        f"{'#':>4}  {'Boundary':<16} {'Event':<22} {'Phase':<14} {'Fault':<16}",
        "-" * 76,
    ]
    for index, boundary, event, phase, fault in _rows(events):
        lines.append(f"{index:>4}  {boundary:<16} {event:<22} {phase:<14} {fault:<16}")
    return "\n".join(lines)


def render_trace(events: Iterable[BoundaryEvent], *, title: str = "Boundary trace") -> None:
    """Print *events* (e.g. a ``BoundaryTrace``) as a table on stderr.

    Uses Rich when it is installed, else the plain table from
    :func:`format_trace`.
    """
    recorded = list(events)
    try:
        console_class, table_class = _load_rich()
    except MissingDependencyError:
        print(title, format_trace(recorded), sep="\n", file=sys.stderr)
        return
    console_class(stderr=True).print(_build_table(table_class, recorded, title))
