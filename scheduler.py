# scheduler.py

import logging
import threading
import time
import constants

logger = logging.getLogger("simple_space")


class TickScheduler:
    """
    Drives World.tick at a fixed rate on a background daemon thread, decoupled
    from the drawing loop.

    Ticks run one after another on the single scheduler thread, so two ticks
    never overlap. If a tick overruns its slot the next one starts immediately.
    Once the scheduler falls more than one interval behind, the missed ticks
    are dropped and the schedule restarts from the current time.

    Data Contract:
    - Inputs:
        - world (World) - The world to advance.
        - viewport (callable) - Returns the current (width, height).
        - config (dict) - The 'simulation' section; reads 'tick_interval_ms'.
    - Side Effects: Calls world.tick from its own thread until stopped.
    """
    def __init__(self, world, viewport, config: dict = None):
        config = config or {}
        self.world = world
        self.viewport = viewport
        self.interval = config.get('tick_interval_ms', constants.DEFAULT_TICK_INTERVAL_MS) / 1000.0
        self.ticks = 0
        self._stop_event = threading.Event()
        self._thread = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self):
        if self.running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, name="physics-ticker", daemon=True)
        self._thread.start()
        logger.info(f"Tick scheduler started ({self.interval * 1000:g} ms per tick).")

    def stop(self, timeout: float = 1.0):
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            if self._thread.is_alive():
                logger.warning(f"Tick scheduler still finishing a tick after {timeout}s; it will exit when the tick returns.")
                return
            self._thread = None
        logger.info(f"Tick scheduler stopped after {self.ticks} ticks.")

    def _run(self):
        next_tick = time.perf_counter()
        while not self._stop_event.is_set():
            width, height = self.viewport()
            try:
                self.world.tick(width, height)
            except Exception:
                logger.exception("Physics tick failed; stopping scheduler.")
                self._stop_event.set()
                raise
            self.ticks += 1

            next_tick += self.interval
            delay = next_tick - time.perf_counter()
            if delay > 0:
                self._stop_event.wait(delay)
            elif delay < -self.interval:
                # Too far behind: resume from now rather than bursting through missed ticks.
                next_tick = time.perf_counter()
