"""Tests de los planificadores de tareas diferidas."""

import threading
import time

from core.scheduler import LoopScheduler, TimerScheduler


def test_loop_scheduler_runs_due_tasks_once(scheduler, clock):
    calls = []
    scheduler.schedule(1.0, lambda: calls.append("a"))

    assert scheduler.run_pending() == 0
    clock.advance(1.0)
    assert scheduler.run_pending() == 1
    assert scheduler.run_pending() == 0
    assert calls == ["a"]


def test_loop_scheduler_skips_cancelled_tasks(scheduler, clock):
    calls = []
    task = scheduler.schedule(0.5, lambda: calls.append("a"))
    scheduler.schedule(0.5, lambda: calls.append("b"))
    task.cancel()

    assert scheduler.pending == 1
    clock.advance(1.0)
    scheduler.run_pending()
    assert calls == ["b"]
    assert task.cancelled and not task.done


def test_loop_scheduler_keeps_future_tasks(scheduler, clock):
    calls = []
    scheduler.schedule(1.0, lambda: calls.append("soon"))
    scheduler.schedule(3.0, lambda: calls.append("later"))

    clock.advance(2.0)
    scheduler.run_pending()
    assert calls == ["soon"]
    assert scheduler.pending == 1


def test_loop_scheduler_task_can_schedule_another(scheduler, clock):
    calls = []

    def first():
        calls.append("first")
        scheduler.schedule(1.0, lambda: calls.append("second"))

    scheduler.schedule(1.0, first)
    clock.advance(1.0)
    scheduler.run_pending()
    clock.advance(1.0)
    scheduler.run_pending()
    assert calls == ["first", "second"]


def test_loop_scheduler_defaults_to_monotonic_clock():
    assert LoopScheduler().clock is time.monotonic


def test_timer_scheduler_fires():
    fired = threading.Event()
    TimerScheduler().schedule(0.01, fired.set)
    assert fired.wait(2.0)


def test_timer_scheduler_cancel():
    fired = threading.Event()
    task = TimerScheduler().schedule(0.2, fired.set)
    task.cancel()
    assert not fired.wait(0.4)
