"""
Tests for the delayed-callback event queue.
"""

from flashdeck.modules.study.scheduler import EventQueue

from conftest import ManualClock


def test_callbacks_run_only_when_due(queue: EventQueue, clock: ManualClock) -> None:
    fired: list[str] = []
    queue.call_later(1.0, lambda: fired.append("a"))

    assert queue.run_due() == 0
    clock.advance(0.5)
    assert queue.run_due() == 0
    clock.advance(0.5)
    assert queue.run_due() == 1
    assert fired == ["a"]
    assert queue.next_due() is None


def test_due_order_and_fifo_ties(queue: EventQueue, clock: ManualClock) -> None:
    fired: list[str] = []
    queue.call_later(2.0, lambda: fired.append("late"))
    queue.call_later(1.0, lambda: fired.append("first"))
    queue.call_later(1.0, lambda: fired.append("second"))

    clock.advance(5)
    queue.run_due()

    assert fired == ["first", "second", "late"]


def test_cancelled_timer_never_fires(queue: EventQueue, clock: ManualClock) -> None:
    fired: list[str] = []
    timer = queue.call_later(1.0, lambda: fired.append("x"))
    timer.cancel()

    clock.advance(2)
    assert queue.run_due() == 0
    assert fired == []
    assert queue.pending == 0


def test_zero_delay_chain_runs_in_one_drain(queue: EventQueue) -> None:
    fired: list[int] = []

    def step(i: int) -> None:
        fired.append(i)
        if i < 3:
            queue.call_later(0, lambda: step(i + 1))

    queue.call_later(0, lambda: step(0))
    queue.run_due()

    assert fired == [0, 1, 2, 3]


def test_run_until_idle_sleeps_until_due(clock: ManualClock) -> None:
    queue = EventQueue(clock=clock)
    slept: list[float] = []
    fired: list[str] = []

    def fake_sleep(seconds: float) -> None:
        slept.append(seconds)
        clock.advance(seconds)

    queue.call_later(2.0, lambda: queue.call_later(0.25, lambda: fired.append("done")))
    queue.run_until_idle(sleep=fake_sleep)

    assert fired == ["done"]
    assert slept == [2.0, 0.25]
