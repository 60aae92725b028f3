import asyncio

import pytest

from feedrank.services.content_store import StaticContentProvider
from feedrank.services.recommendations import ContentRecommendationEngine
from feedrank.services.scheduler import RecomputeScheduler

from tests.conftest import fixed_clock


class GatedProvider(StaticContentProvider):
    """Blocks every fetch until the gate opens."""

    def __init__(self, records):
        super().__init__(records)
        self.gate = asyncio.Event()
        self.fetches = 0

    async def fetch_content(self):
        self.fetches += 1
        await self.gate.wait()
        return await super().fetch_content()


class FailingProvider(StaticContentProvider):
    async def fetch_content(self):
        raise ConnectionError("database down")


def _engine(provider, settings):
    return ContentRecommendationEngine(content_provider=provider, settings=settings, clock=fixed_clock)


@pytest.mark.asyncio
async def test_trigger_runs_a_cycle(corpus, settings):
    scheduler = RecomputeScheduler(_engine(StaticContentProvider(corpus), settings))

    report = await scheduler.trigger()

    assert report is not None
    assert report.snapshot_version == 1
    assert scheduler.cycles_run == 1
    assert scheduler.last_report is report


@pytest.mark.asyncio
async def test_triggers_during_a_cycle_coalesce_into_one_follow_up(corpus, settings):
    provider = GatedProvider(corpus)
    scheduler = RecomputeScheduler(_engine(provider, settings))

    first = asyncio.create_task(scheduler.trigger())
    while not scheduler.is_running:
        await asyncio.sleep(0)

    assert await scheduler.trigger() is None
    assert await scheduler.trigger() is None
    assert await scheduler.trigger() is None

    provider.gate.set()
    report = await first

    assert scheduler.cycles_run == 2
    assert provider.fetches == 2
    assert report.snapshot_version == 2
    assert not scheduler.is_running


@pytest.mark.asyncio
async def test_burst_of_corpus_changes_is_debounced(corpus, settings):
    engine = _engine(StaticContentProvider(corpus), settings)
    scheduler = RecomputeScheduler(engine, debounce_seconds=0.05)

    for _ in range(5):
        engine.on_corpus_changed()
        await asyncio.sleep(0.01)
    await scheduler.wait_idle()

    assert scheduler.cycles_run == 1


@pytest.mark.asyncio
async def test_failed_cycle_is_counted_and_swallowed(corpus, settings):
    scheduler = RecomputeScheduler(_engine(FailingProvider(corpus), settings))

    assert await scheduler.trigger() is None
    assert scheduler.failed_cycles == 1
    assert scheduler.cycles_run == 0
    assert not scheduler.is_running


@pytest.mark.asyncio
async def test_poll_notices_provider_changes(corpus, settings):
    provider = StaticContentProvider(corpus)
    scheduler = RecomputeScheduler(_engine(provider, settings), debounce_seconds=0.01)
    provider.set_records(corpus[:2])

    poller = asyncio.create_task(scheduler.poll_corpus(0.01))
    for _ in range(100):
        if scheduler.cycles_run:
            break
        await asyncio.sleep(0.01)
    poller.cancel()
    with pytest.raises(asyncio.CancelledError):
        await poller
    await scheduler.shutdown()

    assert scheduler.cycles_run >= 1
    assert len(scheduler.engine.snapshot) == 2


@pytest.mark.asyncio
async def test_shutdown_cancels_pending_debounce(corpus, settings):
    scheduler = RecomputeScheduler(_engine(StaticContentProvider(corpus), settings), debounce_seconds=10)
    scheduler.notify_corpus_changed()

    await scheduler.shutdown()

    assert scheduler.cycles_run == 0


@pytest.mark.asyncio
async def test_unexpected_cycle_error_is_counted_and_swallowed(corpus, settings, monkeypatch):
    engine = _engine(StaticContentProvider(corpus), settings)
    scheduler = RecomputeScheduler(engine)

    def broken():
        raise RuntimeError("ranking bug")

    monkeypatch.setattr(engine, "recompute_shared_rankings", broken)

    assert await scheduler.trigger() is None
    assert scheduler.failed_cycles == 1
    assert not scheduler.is_running


@pytest.mark.asyncio
async def test_periodic_loop_survives_unexpected_errors(corpus, settings, monkeypatch):
    engine = _engine(StaticContentProvider(corpus), settings)
    scheduler = RecomputeScheduler(engine)

    def broken():
        raise RuntimeError("ranking bug")

    monkeypatch.setattr(engine, "recompute_shared_rankings", broken)

    loop_task = asyncio.create_task(scheduler.run_periodic(0.01))
    for _ in range(100):
        if scheduler.failed_cycles >= 2:
            break
        await asyncio.sleep(0.01)

    assert not loop_task.done()
    loop_task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await loop_task
    assert scheduler.failed_cycles >= 2


@pytest.mark.asyncio
async def test_change_during_a_cycle_still_waits_for_the_debounce(corpus, settings):
    provider = GatedProvider(corpus)
    scheduler = RecomputeScheduler(_engine(provider, settings), debounce_seconds=0.2)

    first = asyncio.create_task(scheduler.trigger())
    while not scheduler.is_running:
        await asyncio.sleep(0)
    scheduler.notify_corpus_changed()
    provider.gate.set()
    await first

    assert scheduler.cycles_run == 1

    await scheduler.wait_idle()

    assert scheduler.cycles_run == 2


@pytest.mark.asyncio
async def test_change_during_a_debounced_cycle_is_not_lost(corpus, settings):
    provider = GatedProvider(corpus)
    scheduler = RecomputeScheduler(_engine(provider, settings), debounce_seconds=0.02)

    scheduler.notify_corpus_changed()
    while not scheduler.is_running:
        await asyncio.sleep(0.005)
    scheduler.notify_corpus_changed()
    provider.gate.set()
    await scheduler.wait_idle()

    assert scheduler.cycles_run == 2
    assert provider.fetches == 2
