"""Tests for core.scheduler – timers driven by a fake clock."""

import threading

import pytest

from core.scheduler import Scheduler


class TestOneShot:
    def test_runs_after_delay(self, scheduler, tick):
        calls = []
        scheduler.after(100, lambda: calls.append("x"))
        tick(99)
        assert calls == []
        tick(2)
        assert calls == ["x"]
        tick(1000)
        assert calls == ["x"]

    def test_cancel(self, scheduler, tick):
        calls = []
        timer = scheduler.after(100, lambda: calls.append("x"))
        timer.cancel()
        tick(200)
        assert calls == []
        assert scheduler.next_due() is None


class TestPeriodic:
    def test_interval(self, scheduler, tick):
        calls = []
        scheduler.every(100, lambda: calls.append(1))
        tick(350)
        assert len(calls) == 3

    def test_immediate(self, scheduler, tick):
        calls = []
        scheduler.every(100, lambda: calls.append(1), immediate=True)
        tick(0)
        assert len(calls) == 1
        tick(100)
        assert len(calls) == 2

    def test_rejects_non_positive_interval(self, scheduler):
        with pytest.raises(ValueError):
            scheduler.every(0, lambda: None)

    def test_rearm_with_new_interval(self, scheduler, tick):
        calls = []
        timer = scheduler.every(100, lambda: calls.append(1))
        tick(100)
        timer.rearm(interval_ms=1000)
        tick(998)
        assert len(calls) == 1
        tick(3)
        assert len(calls) == 2

    def test_rearm_after_cancel(self, scheduler, tick):
        calls = []
        timer = scheduler.every(100, lambda: calls.append(1))
        timer.cancel()
        tick(500)
        timer.rearm(immediate=True)
        tick(0)
        assert len(calls) == 1

    def test_cancel_from_inside_callback(self, scheduler, tick):
        calls = []
        holder = {}

        def once():
            calls.append(1)
            holder["timer"].cancel()

        holder["timer"] = scheduler.every(100, once)
        tick(1000)
        assert calls == [1]


class TestRunPending:
    def test_due_order(self, scheduler, tick):
        order = []
        scheduler.after(300, lambda: order.append("c"))
        scheduler.after(100, lambda: order.append("a"))
        scheduler.after(200, lambda: order.append("b"))
        tick(300)
        assert order == ["a", "b", "c"]

    def test_failing_callback_does_not_stop_loop(self, scheduler, tick):
        calls = []

        def boom():
            raise RuntimeError("boom")

        scheduler.after(10, boom)
        scheduler.after(20, lambda: calls.append("ok"))
        tick(20)
        assert calls == ["ok"]

    def test_returns_count(self, scheduler, clock):
        scheduler.after(0, lambda: None)
        scheduler.after(0, lambda: None)
        assert scheduler.run_pending() == 2
        assert scheduler.run_pending() == 0


class TestRunForever:
    def test_stops_when_event_set(self):
        scheduler = Scheduler()
        stop = threading.Event()
        scheduler.after(0, stop.set)
        scheduler.run_forever(stop)
        assert stop.is_set()
