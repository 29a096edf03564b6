"""
Tests for the periodic timer.
"""

import threading
import time

from monitoring.scheduler import PeriodicTimer


def test_runs_repeatedly_until_stopped():
    calls = []
    done = threading.Event()

    def callback():
        calls.append(time.monotonic())
        if len(calls) >= 3:
            done.set()

    timer = PeriodicTimer(0.01, callback)
    timer.start(initial_delay=0)
    try:
        assert done.wait(timeout=2)
    finally:
        timer.stop()

    assert not timer.is_active


def test_stop_prevents_further_runs():
    calls = []
    timer = PeriodicTimer(0.01, lambda: calls.append(1))
    timer.start(initial_delay=0)
    time.sleep(0.05)
    timer.stop()
    time.sleep(0.02)
    count = len(calls)

    time.sleep(0.05)

    assert len(calls) == count


def test_runs_never_overlap():
    active = []
    overlaps = []
    done = threading.Event()
    runs = []

    def callback():
        if active:
            overlaps.append(1)
        active.append(1)
        time.sleep(0.02)
        active.pop()
        runs.append(1)
        if len(runs) >= 3:
            done.set()

    timer = PeriodicTimer(0.001, callback)
    timer.start(initial_delay=0)
    try:
        assert done.wait(timeout=2)
    finally:
        timer.stop()

    assert overlaps == []


def test_callback_error_keeps_timer_running():
    runs = []
    done = threading.Event()

    def callback():
        runs.append(1)
        if len(runs) >= 2:
            done.set()
        raise RuntimeError("tick failed")

    timer = PeriodicTimer(0.01, callback)
    timer.start(initial_delay=0)
    try:
        assert done.wait(timeout=2)
    finally:
        timer.stop()


def test_restart_replaces_pending_run():
    calls = []
    timer = PeriodicTimer(10, lambda: calls.append(1))
    timer.start()
    timer.start(initial_delay=0)
    time.sleep(0.05)
    timer.stop()

    assert calls == [1]
