"""Debounced, coalesced scheduling of full recompute cycles."""

import asyncio
from typing import Optional

from feedrank.services.recommendations.engine import ContentRecommendationEngine, CycleReport
from feedrank.utils.exceptions import CalculationFailedError
from feedrank.utils.logger import get_logger

logger = get_logger(__name__)


class RecomputeScheduler:
    """Runs the engine's full cycle, never two at once.

    Corpus-change notifications are debounced; a request arriving while a
    cycle runs is folded into a single follow-up cycle.
    """

    DEFAULT_DEBOUNCE_SECONDS = 1.0

    def __init__(self, engine: ContentRecommendationEngine,
                 debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS):
        self.engine = engine
        self.debounce_seconds = debounce_seconds
        self.cycles_run = 0
        self.failed_cycles = 0
        self.last_report: Optional[CycleReport] = None

        self._lock = asyncio.Lock()
        self._pending = False
        self._last_change = 0.0
        self._debounce_task: Optional[asyncio.Task] = None

        engine.set_scheduler(self)

    @property
    def is_running(self) -> bool:
        return self._lock.locked()

    def notify_corpus_changed(self) -> None:
        """Schedule a cycle once changes stop arriving for the debounce period.

        Must be called from the running event loop.
        """
        loop = asyncio.get_running_loop()
        self._last_change = loop.time()
        if self._debounce_task is None or self._debounce_task.done():
            self._debounce_task = loop.create_task(self._debounced_run())

    async def _debounced_run(self) -> None:
        loop = asyncio.get_running_loop()
        while True:
            remaining = self._last_change + self.debounce_seconds - loop.time()
            if remaining > 0:
                await asyncio.sleep(remaining)
                continue
            seen = self._last_change
            await self.trigger()
            # Changes that landed during the cycle get their own quiet period
            if self._last_change == seen:
                break

    async def trigger(self) -> Optional[CycleReport]:
        """Run a cycle now, or mark one pending if a cycle is in progress."""
        if self._lock.locked():
            self._pending = True
            logger.debug("Recompute already running, coalescing request")
            return None

        async with self._lock:
            report = await self._run_once()
            while self._pending:
                self._pending = False
                report = await self._run_once()
        return report

    async def _run_once(self) -> Optional[CycleReport]:
        try:
            report = await self.engine.run_full_cycle()
        except CalculationFailedError as e:
            self.failed_cycles += 1
            logger.warning(f"Recompute cycle failed, retrying on next tick: {e.message}")
            return None
        except Exception as e:
            self.failed_cycles += 1
            logger.error(f"Unexpected error in recompute cycle: {e}", exc_info=True)
            return None
        self.cycles_run += 1
        self.last_report = report
        return report

    async def wait_idle(self) -> None:
        """Wait for any debounced cycle to finish."""
        task = self._debounce_task
        if task is not None and not task.done():
            await task

    async def run_periodic(self, interval_seconds: float) -> None:
        """Trigger a full cycle every interval until cancelled."""
        logger.info(f"Periodic recompute started ({interval_seconds}s interval)")
        while True:
            await asyncio.sleep(interval_seconds)
            await self.trigger()

    async def poll_corpus(self, interval_seconds: float) -> None:
        """Check the content provider for changes every interval until cancelled."""
        logger.info(f"Content polling started ({interval_seconds}s interval)")
        while True:
            await asyncio.sleep(interval_seconds)
            try:
                if self.engine.content_provider.has_changed():
                    logger.info("Content corpus changed, scheduling recompute")
                    self.notify_corpus_changed()
            except OSError as e:
                logger.warning("Content poll error: %s", e)

    async def shutdown(self) -> None:
        task = self._debounce_task
        if task is not None and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
