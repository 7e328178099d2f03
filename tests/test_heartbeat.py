"""Tests for the heartbeat scheduler."""

import asyncio
import itertools
from unittest.mock import patch

import pytest

from botgate.heartbeat import HeartbeatScheduler


def counting_callback(target: int):
    """Callback that sets an event after `target` calls."""
    calls = []
    done = asyncio.Event()

    async def callback():
        calls.append(1)
        if len(calls) >= target:
            done.set()

    return callback, calls, done


class TestHeartbeatScheduler:
    """Tests for HeartbeatScheduler."""

    @pytest.mark.asyncio
    async def test_fires_repeatedly(self):
        scheduler = HeartbeatScheduler(jitter=lambda: 1.0)
        callback, calls, done = counting_callback(3)

        scheduler.start(0.001, callback)
        await asyncio.wait_for(done.wait(), timeout=5)
        await scheduler.stop()

        assert len(calls) >= 3

    @pytest.mark.asyncio
    async def test_jitter_is_redrawn_every_cycle(self):
        jitters = itertools.chain([0.5, 0.25, 0.75], itertools.repeat(0.1))
        scheduler = HeartbeatScheduler(jitter=lambda: next(jitters))
        callback, calls, done = counting_callback(3)

        real_sleep = asyncio.sleep
        delays = []

        async def fake_sleep(delay):
            delays.append(delay)
            await real_sleep(0)

        with patch("botgate.heartbeat.asyncio.sleep", fake_sleep):
            scheduler.start(8.0, callback)
            await asyncio.wait_for(done.wait(), timeout=5)
            await scheduler.stop()

        assert delays[:3] == [4.0, 2.0, 6.0]

    @pytest.mark.asyncio
    async def test_stop_prevents_further_callbacks(self):
        scheduler = HeartbeatScheduler(jitter=lambda: 1.0)
        callback, calls, done = counting_callback(1)

        scheduler.start(0.001, callback)
        await asyncio.wait_for(done.wait(), timeout=5)
        await scheduler.stop()
        fired = len(calls)

        await asyncio.sleep(0.05)
        assert len(calls) == fired
        assert scheduler.running is False

    @pytest.mark.asyncio
    async def test_stop_before_first_fire(self):
        scheduler = HeartbeatScheduler(jitter=lambda: 1.0)
        callback, calls, _ = counting_callback(1)

        scheduler.start(0.01, callback)
        await scheduler.stop()
        await asyncio.sleep(0.05)

        assert calls == []

    @pytest.mark.asyncio
    async def test_wait_finishing_after_cancel_does_not_fire(self):
        scheduler = HeartbeatScheduler(jitter=lambda: 1.0)
        callback, calls, _ = counting_callback(1)

        real_sleep = asyncio.sleep

        async def cancelled_while_waiting(delay):
            scheduler.cancelled.set()
            await real_sleep(0)

        with patch("botgate.heartbeat.asyncio.sleep", cancelled_while_waiting):
            scheduler.start(1.0, callback)
            await scheduler.task

        assert calls == []

    @pytest.mark.asyncio
    async def test_callback_errors_do_not_stop_ticking(self, caplog):
        scheduler = HeartbeatScheduler(jitter=lambda: 1.0)
        calls = []
        done = asyncio.Event()

        async def flaky():
            calls.append(1)
            if len(calls) == 1:
                raise RuntimeError("boom")
            done.set()

        scheduler.start(0.001, flaky)
        await asyncio.wait_for(done.wait(), timeout=5)
        await scheduler.stop()

        assert len(calls) >= 2
        assert "Heartbeat callback failed" in caplog.text

    @pytest.mark.asyncio
    async def test_start_replaces_running_task(self):
        scheduler = HeartbeatScheduler(jitter=lambda: 1.0)
        callback, _, _ = counting_callback(1)

        scheduler.start(60, callback)
        first = scheduler.task
        scheduler.start(60, callback)
        await asyncio.sleep(0)

        assert first.cancelled() or first.done()
        assert scheduler.running is True
        await scheduler.stop()

    @pytest.mark.asyncio
    async def test_stop_when_never_started(self):
        scheduler = HeartbeatScheduler()
        await scheduler.stop()
        assert scheduler.running is False
