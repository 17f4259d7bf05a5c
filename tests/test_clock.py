# FILE: tests/test_clock.py
import asyncio
import pytest

from simulation.clock import SimulationClock

def run(coro):
    return asyncio.run(coro)

def test_ticks_at_interval():
    async def scenario():
        clock = SimulationClock(interval_ms=10)
        calls = []
        assert clock.start(lambda: calls.append(1))
        assert clock.is_running
        await asyncio.sleep(0.15)
        clock.stop()
        return calls, clock

    calls, clock = run(scenario())
    assert len(calls) >= 3
    assert clock.tick_count == len(calls)
    assert not clock.is_running

def test_second_start_keeps_a_single_driver():
    async def scenario():
        clock = SimulationClock(interval_ms=20)
        calls = []
        assert clock.start(lambda: calls.append(1))
        assert not clock.start(lambda: calls.append(1))
        assert not clock.start(lambda: calls.append(1), interval_ms=1)
        await asyncio.sleep(0.1)
        clock.stop()
        return calls, clock

    calls, clock = run(scenario())
    assert clock.interval_ms == 20
    assert 1 <= len(calls) <= 6

def test_stop_halts_ticking():
    async def scenario():
        clock = SimulationClock(interval_ms=10)
        calls = []
        clock.start(lambda: calls.append(1))
        await asyncio.sleep(0.05)
        assert clock.stop()
        assert not clock.stop()
        count = len(calls)
        await asyncio.sleep(0.05)
        return count, len(calls)

    before, after = run(scenario())
    assert before == after

def test_awaits_async_tick_functions():
    async def scenario():
        clock = SimulationClock(interval_ms=10)
        calls = []

        async def tick():
            await asyncio.sleep(0)
            calls.append(1)

        clock.start(tick)
        await asyncio.sleep(0.08)
        clock.stop()
        return calls

    assert len(run(scenario())) >= 2

def test_failing_tick_does_not_stop_the_clock():
    async def scenario():
        clock = SimulationClock(interval_ms=10)

        def tick():
            raise RuntimeError("boom")

        clock.start(tick)
        await asyncio.sleep(0.08)
        running = clock.is_running
        clock.stop()
        return running, clock.tick_count

    running, ticks = run(scenario())
    assert running
    assert ticks >= 2

def test_restart_after_stop():
    async def scenario():
        clock = SimulationClock(interval_ms=10)
        calls = []
        clock.start(lambda: calls.append("first"))
        await asyncio.sleep(0.04)
        clock.stop()
        assert clock.start(lambda: calls.append("second"))
        await asyncio.sleep(0.04)
        clock.stop()
        return calls

    calls = run(scenario())
    assert "first" in calls and "second" in calls
    assert calls.index("second") > max(i for i, c in enumerate(calls) if c == "first")

def test_stop_without_start_is_harmless():
    clock = SimulationClock()
    assert not clock.stop()
    assert not clock.is_running

def test_start_requires_a_running_loop():
    clock = SimulationClock()
    with pytest.raises(RuntimeError):
        clock.start(lambda: None)
