"""Tests for execution slots and per-context boundaries.

Coverage:
* ``InstanceSlot`` / ``ContextSlot`` set-reset semantics.
* ``make_slot`` scope validation.
* ``scope="context"`` isolates threads and asyncio tasks.
* ``scope="instance"`` is shared across threads.
* Contexts copied during a call do not outlive it.
"""

from __future__ import annotations

import asyncio
import contextvars
import threading
from unittest.mock import MagicMock

import pytest

from call_boundary import Boundary
from call_boundary.core.models import _Execution
from call_boundary.core.slots import ContextSlot, InstanceSlot, make_slot
from call_boundary.exceptions import ConfigurationError


# ---------------------------------------------------------------------------
# Slot primitives
# ---------------------------------------------------------------------------

class TestInstanceSlot:
    def test_set_and_reset(self) -> None:
        slot: InstanceSlot[int] = InstanceSlot()
        execution: _Execution[int] = _Execution(enter_result=1)
        assert slot.get() is None
        token = slot.set(execution)
        assert slot.get() is execution
        slot.reset(token)
        assert slot.get() is None

    def test_inactive_record_reads_as_empty(self) -> None:
        slot: InstanceSlot[int] = InstanceSlot()
        slot.set(_Execution(active=False))
        assert slot.get() is None


class TestContextSlot:
    def test_set_and_reset(self) -> None:
        slot: ContextSlot[int] = ContextSlot("test")
        execution: _Execution[int] = _Execution(enter_result=1)
        assert slot.get() is None
        token = slot.set(execution)
        assert slot.get() is execution
        slot.reset(token)
        assert slot.get() is None

    def test_slots_are_independent(self) -> None:
        first: ContextSlot[int] = ContextSlot("same")
        second: ContextSlot[int] = ContextSlot("same")
        token = first.set(_Execution())
        try:
            assert second.get() is None
        finally:
            first.reset(token)

    def test_inactive_record_reads_as_empty(self) -> None:
        slot: ContextSlot[int] = ContextSlot("test")
        execution: _Execution[int] = _Execution(enter_result=1)
        token = slot.set(execution)
        try:
            execution.active = False
            assert slot.get() is None
        finally:
            slot.reset(token)


class TestMakeSlot:
    def test_instance(self) -> None:
        assert isinstance(make_slot("instance"), InstanceSlot)

    def test_context(self) -> None:
        assert isinstance(make_slot("context"), ContextSlot)

    def test_unknown_scope_rejected(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            make_slot("process")  # type: ignore[arg-type]
        assert "process" in str(exc_info.value)
        assert exc_info.value.hint is not None

    def test_boundary_rejects_unknown_scope(self) -> None:
        with pytest.raises(ConfigurationError):
            Boundary(scope="global")  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# Concurrency
# ---------------------------------------------------------------------------

def _run_in_thread(boundary: Boundary[object]) -> bool:
    seen: list[bool] = []
    thread = threading.Thread(target=lambda: seen.append(boundary.in_boundary()))
    thread.start()
    thread.join()
    return seen[0]


class TestThreads:
    def test_context_scope_is_per_thread(self) -> None:
        boundary: Boundary[object] = Boundary(scope="context")
        assert boundary.enter(lambda _: _run_in_thread(boundary)) is False

    def test_instance_scope_is_shared(self) -> None:
        boundary: Boundary[object] = Boundary(scope="instance")
        assert boundary.enter(lambda _: _run_in_thread(boundary)) is True

    def test_context_scope_runs_hooks_per_thread(self) -> None:
        entered: list[str] = []
        boundary = Boundary(lambda: entered.append(threading.current_thread().name), scope="context")

        def other_thread() -> None:
            boundary.enter()

        def work(_: object) -> None:
            thread = threading.Thread(target=other_thread, name="worker")
            thread.start()
            thread.join()

        boundary.enter(work)
        assert sorted(entered) == sorted([threading.current_thread().name, "worker"])


class TestAsyncTasks:
    def test_each_task_runs_its_own_outermost_call(self) -> None:
        counter = {"value": 0}

        def on_enter() -> int:
            counter["value"] += 1
            return counter["value"]

        boundary = Boundary(on_enter, scope="context")

        async def task() -> int:
            await asyncio.sleep(0)
            return boundary.enter(lambda result: boundary.enter(lambda nested: nested))

        async def main() -> list[int]:
            return list(await asyncio.gather(task(), task(), task()))

        assert sorted(asyncio.run(main())) == [1, 2, 3]
        assert boundary.in_boundary() is False

    def test_task_outliving_the_call_starts_its_own(self) -> None:
        calls = {"enter": 0, "exit": 0}

        def on_enter() -> int:
            calls["enter"] += 1
            return calls["enter"]

        def on_exit(_: object) -> None:
            calls["exit"] += 1

        boundary = Boundary(on_enter, on_exit, scope="context")

        async def later() -> tuple[bool, int]:
            return boundary.in_boundary(), boundary.enter(lambda result: result)

        async def main() -> tuple[bool, int]:
            loop = asyncio.get_running_loop()
            task = boundary.enter(lambda _: loop.create_task(later()))
            assert boundary.in_boundary() is False
            return await task

        assert asyncio.run(main()) == (False, 2)
        assert calls == {"enter": 2, "exit": 2}


class TestCopiedContexts:
    def test_copied_context_sees_finished_call_as_left(self) -> None:
        exits: list[object] = []
        boundary = Boundary(lambda: "r", exits.append, scope="context")
        captured = boundary.enter(lambda _: contextvars.copy_context())
        assert len(exits) == 1

        seen: list[bool] = []

        def run_later() -> None:
            seen.append(boundary.in_boundary())
            boundary.enter()
            seen.append(boundary.in_boundary())

        thread = threading.Thread(target=lambda: captured.run(run_later))
        thread.start()
        thread.join()

        assert seen == [False, False]
        assert len(exits) == 2

    def test_copied_context_inside_running_call_is_nested(self) -> None:
        on_enter = MagicMock(return_value="r")
        boundary = Boundary(on_enter, scope="context")

        def work(_: str) -> str:
            return contextvars.copy_context().run(boundary.enter, lambda result: result + "!")

        assert boundary.enter(work) == "r!"
        assert on_enter.call_count == 1
