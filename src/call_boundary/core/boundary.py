"""The :class:`Boundary`: enter/exit hooks scoped to the outermost call.

A boundary represents everything below a given point in the call stack.
The first :meth:`Boundary.enter` on a stack runs the enter-hook, then
the work, then the exit-hook.  Any ``enter`` made while that call is
still in progress is *nested*: its work runs immediately with the same
enter-result and neither hook runs again.

Lifecycle of one outermost call
-------------------------------
``IDLE → ENTERING_HOOK → IN_WORK → EXITING_HOOK → IDLE``

* An enter-hook fault takes the error edge ``ENTERING_HOOK → IDLE``:
  the slot is rolled back and the fault re-raised; neither the work nor
  the exit-hook runs.
* A work fault is held, shown to the exit-hook, and re-raised afterwards
  unless the exit-hook claimed it through ``retrieve_fault``.
* An exit-hook fault propagates only when no unclaimed work fault is
  outstanding; otherwise the work fault wins, as with ``finally``.

Faults always escape as the original exception object.
"""

from __future__ import annotations

import functools
from collections.abc import Callable
from typing import Any, Generic, TypeVar, overload

from call_boundary.core.models import (
    BoundaryEvent,
    BoundaryOptions,
    EventKind,
    ExitInfo,
    Phase,
    Scope,
    _Execution,
)
from call_boundary.core.protocols import BoundaryListener, ExecutionSlot
from call_boundary.core.slots import make_slot
from call_boundary.exceptions import CannotEnterError, ConfigurationError
from call_boundary.utils.logging import get_logger

E = TypeVar("E")
T = TypeVar("T")

logger = get_logger(__name__)


class _FaultCell:
    """Holds the work's fault and whether the exit-hook has claimed it."""

    __slots__ = ("fault", "claimed")

    def __init__(self, fault: BaseException | None) -> None:
        self.fault = fault
        self.claimed = fault is None

    def claim(self) -> BaseException | None:
        self.claimed = True
        return self.fault


class Boundary(Generic[E]):
    """Guard that runs hooks once around the outermost call of a stack.

    Parameters
    ----------
    on_enter:
        Called with no arguments at the start of every outermost call.
        Its return value is handed to every piece of work inside the
        boundary and to the exit-hook.  It must not call :meth:`enter`.
    on_exit:
        Called with an :class:`~call_boundary.core.models.ExitInfo` when
        the outermost call finishes, after the boundary has been left.
        It may call :meth:`enter`, which starts a fresh outermost call.
    scope:
        ``"instance"`` (default) for a single logical call stack, or
        ``"context"`` to keep the "inside" state per thread / asyncio
        task.
    listener:
        Optional :class:`~call_boundary.core.protocols.BoundaryListener`
        notified of every lifecycle event.
    name:
        Label used in log records and events.

    ``enter``, ``in_boundary`` and ``wrap`` are bound methods and keep
    working after being detached from the instance.

    Raises
    ------
    ConfigurationError
        If a hook is not callable or *scope* is unknown.
    """

    def __init__(
        self,
        on_enter: Callable[[], E] | None = None,
        on_exit: Callable[[ExitInfo[E]], Any] | None = None,
        *,
        scope: Scope = "instance",
        listener: BoundaryListener | None = None,
        name: str = "boundary",
    ) -> None:
        for label, hook in (("on_enter", on_enter), ("on_exit", on_exit)):
            if hook is not None and not callable(hook):
                raise ConfigurationError(
                    f"{label} must be callable, got {type(hook).__name__}",
                )
        self._on_enter: Callable[[], E] | None = on_enter
        self._on_exit: Callable[[ExitInfo[E]], Any] | None = on_exit
        self._listener: BoundaryListener | None = listener
        self._name: str = name
        self._scope: Scope = scope
        self._slot: ExecutionSlot[E] = make_slot(scope, name)

    @classmethod
    def from_options(cls, options: BoundaryOptions[E]) -> Boundary[E]:
        """Build a boundary from a :class:`BoundaryOptions` value."""
        return cls(
            options.on_enter,
            options.on_exit,
            scope=options.scope,
            listener=options.listener,
            name=options.name,
        )

    @property
    def name(self) -> str:
        return self._name

    @property
    def scope(self) -> Scope:
        return self._scope

    def __repr__(self) -> str:
        return f"Boundary(name={self._name!r}, scope={self._scope!r}, inside={self.in_boundary()})"

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def in_boundary(self) -> bool:
        """Return ``True`` if called from within the boundary.

        This includes the enter-hook but not the exit-hook.
        """
        return self._slot.get() is not None

    @overload
    def enter(self) -> None: ...

    @overload
    def enter(self, work: Callable[[E], T]) -> T: ...

    def enter(self, work: Callable[[E], T] | None = None) -> T | None:
        """Run *work* inside the boundary and pass its return value through.

        *work* receives the enter-hook's result.  When this is the
        outermost call the enter-hook runs first and the exit-hook runs
        once *work* has finished, whether or not it raised.

        Raises
        ------
        CannotEnterError
            If called while the enter-hook of the outer call is running.
        """
        execution = self._slot.get()
        if execution is not None:
            return self._enter_nested(execution, work)
        return self._enter_outermost(work)

    def wrap(self, func: Callable[..., T]) -> Callable[..., T]:
        """Decorate *func* so every call to it runs inside the boundary.

        The enter-result is not passed to *func*.
        """

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> T:
            return self.enter(lambda _enter_result: func(*args, **kwargs))

        return wrapper

    # ------------------------------------------------------------------
    # Nested path
    # ------------------------------------------------------------------

    def _enter_nested(self, execution: _Execution[E], work: Callable[[E], T] | None) -> T | None:
        if execution.in_enter_hook:
            self._emit(EventKind.REJECTED, Phase.ENTERING_HOOK)
            raise CannotEnterError(
                f"Cannot enter boundary {self._name!r} from its own enter-hook",
                hint="The enter-hook must not call enter(); its result is not ready yet.",
            )
        self._emit(EventKind.NESTED, Phase.IN_WORK)
        if work is None:
            return None
        return work(execution.enter_result)  # type: ignore[arg-type]

    # ------------------------------------------------------------------
    # Outermost path
    # ------------------------------------------------------------------

    def _enter_outermost(self, work: Callable[[E], T] | None) -> T | None:
        execution: _Execution[E] = _Execution()
        token = self._slot.set(execution)

        try:
            self._emit(EventKind.ENTER, Phase.ENTERING_HOOK)
            if self._on_enter is not None:
                execution.in_enter_hook = True
                execution.enter_result = self._on_enter()
                execution.in_enter_hook = False
            if work is not None:
                self._emit(EventKind.WORK, Phase.IN_WORK)
        except BaseException as exc:
            execution.active = False
            self._slot.reset(token)
            self._emit(EventKind.ENTER_FAILED, Phase.IDLE, exc)
            raise

        result: T | None = None
        fault: BaseException | None = None
        try:
            if work is not None:
                result = work(execution.enter_result)  # type: ignore[arg-type]
        except BaseException as exc:
            fault = exc
        finally:
            execution.active = False
            self._slot.reset(token)

        if fault is not None:
            self._emit(EventKind.WORK_FAILED, Phase.IN_WORK, fault)

        cell = _FaultCell(fault)
        self._emit(EventKind.EXIT, Phase.EXITING_HOOK)
        if self._on_exit is not None:
            info: ExitInfo[E] = ExitInfo(
                enter_result=execution.enter_result,
                fault_occurred=cell.fault is not None,
                retrieve_fault=cell.claim,
            )
            try:
                self._on_exit(info)
            except Exception as exc:
                if cell.claimed:
                    raise
                # First fault wins.
                self._emit(EventKind.EXIT_FAULT_DISCARDED, Phase.EXITING_HOOK, exc)

        try:
            self._emit(EventKind.LEAVE, Phase.IDLE, None if cell.claimed else cell.fault)
        finally:
            if not cell.claimed:
                raise cell.fault  # type: ignore[misc]
        return result

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def _emit(self, kind: EventKind, phase: Phase, fault: BaseException | None = None) -> None:
        fault_type = type(fault).__name__ if fault is not None else None
        logger.debug(
            "boundary %s: %s",
            self._name,
            kind.value,
            extra={
                "boundary": self._name,
                "event": kind.value,
                "phase": phase.value,
                "fault_type": fault_type,
            },
        )
        if self._listener is not None:
            self._listener.on_event(
                BoundaryEvent(boundary=self._name, kind=kind, phase=phase, fault_type=fault_type),
            )
