# FILE: simulation/clock.py
import asyncio
import inspect
import logging
from typing import Callable, Optional

class SimulationClock:
    """
    Drives a tick callback on the running asyncio loop at a fixed interval.

    At most one driver task exists per clock. stop() bumps a generation token
    that the driver checks before every tick, so a tick that was already
    sleeping when stop() ran never fires.
    """
    def __init__(self, interval_ms: float = 300):
        self.interval_ms = interval_ms
        self.tick_count = 0
        self._task: Optional[asyncio.Task] = None
        self._generation = 0

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self, tick_fn: Callable, interval_ms: Optional[float] = None) -> bool:
        """Begins ticking; returns False and leaves the existing driver alone if already running."""
        if self.is_running:
            logging.debug("Simulation clock already running; start ignored.")
            return False
        if interval_ms is not None:
            self.interval_ms = interval_ms
        loop = asyncio.get_running_loop()
        self._generation += 1
        self._task = loop.create_task(self._run(tick_fn, self._generation))
        logging.info(f"Simulation clock started ({self.interval_ms} ms interval).")
        return True

    def stop(self) -> bool:
        self._generation += 1
        was_running = self.is_running
        if was_running:
            self._task.cancel()
            logging.info(f"Simulation clock stopped after {self.tick_count} ticks.")
        self._task = None
        return was_running

    async def _run(self, tick_fn: Callable, generation: int):
        interval_s = self.interval_ms / 1000.0
        while generation == self._generation:
            await asyncio.sleep(interval_s)
            if generation != self._generation:
                break
            try:
                result = tick_fn()
                if inspect.isawaitable(result):
                    await result
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logging.error(f"Simulation tick failed: {e}")
            self.tick_count += 1
