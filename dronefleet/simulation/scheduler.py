"""Background driver that ticks a FleetEngine at a fixed cadence."""

import logging
import threading
import time
from typing import Optional

from ..core.engine import FleetEngine

logger = logging.getLogger(__name__)


class TickScheduler:
    """Call ``engine.tick()`` every ``interval`` seconds on a daemon thread.

    The engine serializes ticks against commands, so the shell may keep
    issuing commands while the scheduler runs.
    """

    def __init__(self, engine: FleetEngine, interval: Optional[float] = None):
        """Initialize scheduler.

        Args:
            engine: Engine to drive
            interval: Wall-clock seconds between ticks. Uses the engine's
                tick_interval if None.
        """
        self.engine = engine
        self.interval = interval or engine.config.tick_interval
        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()

    @property
    def is_alive(self) -> bool:
        """Whether the tick thread is running."""
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> bool:
        """Start the engine and the background tick thread.

        Returns:
            True if started (or already running)
        """
        if self.is_alive:
            logger.warning("Tick scheduler already running")
            return True

        if not self.engine.running:
            self.engine.start()
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run_loop, name="fleet-tick", daemon=True)
        self._thread.start()
        logger.info(f"Tick scheduler started ({self.interval * 1000:.0f} ms)")
        return True

    def stop(self) -> None:
        """Stop the engine and join the tick thread."""
        if self.engine.running:
            self.engine.stop()
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=2.0)
            self._thread = None
            logger.info("Tick scheduler stopped")

    def _run_loop(self) -> None:
        """Tick while the engine is running, compensating for tick duration."""
        next_tick = time.monotonic()
        while not self._stop_event.is_set():
            if self.engine.running:
                try:
                    self.engine.tick()
                except Exception as e:
                    logger.error(f"Tick failed: {e}")

            next_tick += self.interval
            delay = next_tick - time.monotonic()
            if delay < 0:
                # Fell behind; resync instead of bursting
                next_tick = time.monotonic()
                delay = 0.0
            self._stop_event.wait(delay)

    def __enter__(self) -> "TickScheduler":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
