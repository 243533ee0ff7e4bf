"""Repeat the archive sweep every `frequency_days` days until stopped."""

import logging
import threading
from typing import Callable, Optional

from .config import Config
from .traversal import SweepResult, sweep

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60


class ArchiveScheduler:
    """Runs one sweep at a time, sleeping between sweeps on a stop event.

    A sweep that raises is logged and the loop carries on; only `stop()`
    ends `run_forever()`.
    """

    def __init__(
        self,
        config: Config,
        stop_event: Optional[threading.Event] = None,
        sweep_fn: Callable[..., SweepResult] = sweep,
    ):
        self.config = config
        self.stop_event = stop_event or threading.Event()
        self._sweep_fn = sweep_fn

    @property
    def interval_seconds(self) -> float:
        return self.config.frequency_days * SECONDS_PER_DAY

    def run_once(self) -> Optional[SweepResult]:
        try:
            return self._sweep_fn(self.config, self.stop_event)
        except Exception:
            logger.exception("Error during archive sweep")
            return None

    def run_forever(self) -> int:
        sweeps = 0
        while not self.stop_event.is_set():
            self.run_once()
            sweeps += 1
            logger.info("Next sweep in %d day(s)", self.config.frequency_days)
            if self.stop_event.wait(self.interval_seconds):
                break
        logger.info("Archive scheduler stopped after %d sweep(s)", sweeps)
        return sweeps

    def stop(self):
        self.stop_event.set()
