"""
🧪 test_prefetch_coordinator.py - дедуп-кеш, debounce та груповий префетч.

Перевіряє:
- hover → leave до спрацювання таймера не робить жодного запиту
- два швидкі batch-виклики запитують кожен ключ рівно один раз
- cancel під час INFLIGHT не перериває запит
- FAILED одразу доступний для повтору, DONE свіжий до TTL
"""

import asyncio

import pytest

from storefront.domain.prefetch import PrefetchParams, PrefetchState
from storefront.infrastructure.prefetch import PrefetchCoordinator
from storefront.errors import FetchFailure

IM = PrefetchParams("IM")
TV = PrefetchParams("TV")
PHONES = PrefetchParams("IM", "M1")


class CallCounter:
    def __init__(self, delay: float = 0.0, error: Exception | None = None):
        self.calls = 0
        self.batches = []
        self.delay = delay
        self.error = error

    async def __call__(self, survivors=None):
        self.calls += 1
        if survivors is not None:
            self.batches.append(list(survivors))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error


def test_should_prefetch_on_fresh_coordinator():
    coordinator = PrefetchCoordinator()
    assert coordinator.should_prefetch(IM)
    assert coordinator.state_of(IM) is PrefetchState.IDLE


@pytest.mark.asyncio
async def test_hover_then_leave_before_delay_makes_no_call():
    coordinator = PrefetchCoordinator()
    action = CallCounter()

    assert coordinator.schedule_prefetch(IM, 30, action)
    assert coordinator.state_of(IM) is PrefetchState.SCHEDULED
    assert not coordinator.should_prefetch(IM)
    assert coordinator.cancel(IM)

    await asyncio.sleep(0.06)

    assert action.calls == 0
    assert coordinator.state_of(IM) is PrefetchState.IDLE
    assert coordinator.should_prefetch(IM)


@pytest.mark.asyncio
async def test_debounce_last_call_wins():
    coordinator = PrefetchCoordinator()
    first, second = CallCounter(), CallCounter()

    coordinator.schedule_prefetch(IM, 20, first)
    coordinator.schedule_prefetch(IM, 20, second)
    await asyncio.sleep(0.05)
    await coordinator.drain()

    assert first.calls == 0
    assert second.calls == 1
    assert coordinator.state_of(IM) is PrefetchState.DONE


@pytest.mark.asyncio
async def test_fired_timer_moves_through_inflight_to_done(fake_clock):
    coordinator = PrefetchCoordinator(ttl_sec=60, clock=fake_clock)
    action = CallCounter(delay=0.03)

    coordinator.schedule_prefetch(IM, 0, action)
    await asyncio.sleep(0.01)
    assert coordinator.state_of(IM) is PrefetchState.INFLIGHT
    assert not coordinator.schedule_prefetch(IM, 0, action)

    await coordinator.drain()

    entry = coordinator.entry(IM)
    assert entry.state is PrefetchState.DONE
    assert entry.expires_at == fake_clock.now + 60
    assert action.calls == 1


@pytest.mark.asyncio
async def test_done_is_fresh_until_ttl_expires(fake_clock):
    coordinator = PrefetchCoordinator(ttl_sec=300, clock=fake_clock)
    await coordinator.batch([IM], CallCounter())

    assert coordinator.state_of(IM) is PrefetchState.DONE
    fake_clock.advance(299)
    assert not coordinator.should_prefetch(IM)
    fake_clock.advance(2)
    assert coordinator.should_prefetch(IM)
    assert coordinator.prune_expired() == 1
    assert len(coordinator) == 0


@pytest.mark.asyncio
async def test_overlapping_batches_fetch_each_key_once():
    coordinator = PrefetchCoordinator()
    action = CallCounter(delay=0.02)

    first = coordinator.batch([IM, TV, PHONES], action)
    second = coordinator.batch([TV, PHONES, PrefetchParams("im")], action)

    assert first is not None
    assert second is None
    await coordinator.drain()

    fetched = [fp.key for batch in action.batches for fp in batch]
    assert sorted(fetched) == sorted({IM.key, TV.key, PHONES.key})
    assert len(fetched) == len(set(fetched))


@pytest.mark.asyncio
async def test_batch_dedupes_within_list_and_skips_scheduled():
    coordinator = PrefetchCoordinator()
    timer_action = CallCounter()
    coordinator.schedule_prefetch(TV, 1000, timer_action)
    action = CallCounter()

    task = coordinator.batch([IM, PrefetchParams(" im "), TV], action)
    await task

    assert action.batches == [[IM]]
    assert coordinator.state_of(TV) is PrefetchState.SCHEDULED
    coordinator.clear()


@pytest.mark.asyncio
async def test_cancel_during_inflight_lets_request_finish():
    coordinator = PrefetchCoordinator()
    action = CallCounter(delay=0.03)

    coordinator.schedule_prefetch(IM, 0, action)
    await asyncio.sleep(0.01)
    assert coordinator.state_of(IM) is PrefetchState.INFLIGHT

    assert coordinator.cancel(IM) is False
    await coordinator.drain()

    assert action.calls == 1
    assert coordinator.state_of(IM) is PrefetchState.DONE


@pytest.mark.asyncio
async def test_failure_is_swallowed_and_retryable():
    coordinator = PrefetchCoordinator()
    failing = CallCounter(error=FetchFailure("boom", url="http://api/products/filtered"))

    await coordinator.batch([IM], failing)

    entry = coordinator.entry(IM)
    assert entry.state is PrefetchState.FAILED
    assert entry.last_error == "boom"
    assert coordinator.should_prefetch(IM)

    ok = CallCounter()
    await coordinator.batch([IM], ok)
    assert coordinator.state_of(IM) is PrefetchState.DONE
    assert coordinator.entry(IM).attempts == 2


@pytest.mark.asyncio
async def test_unexpected_exception_marks_failed():
    coordinator = PrefetchCoordinator()
    await coordinator.batch([IM, TV], CallCounter(error=RuntimeError("nope")))

    assert coordinator.state_of(IM) is PrefetchState.FAILED
    assert coordinator.state_of(TV) is PrefetchState.FAILED


@pytest.mark.asyncio
async def test_clear_forgets_state_and_late_completion_is_ignored():
    coordinator = PrefetchCoordinator()
    action = CallCounter(delay=0.02)
    coordinator.batch([IM], action)
    coordinator.schedule_prefetch(TV, 1000, CallCounter())

    coordinator.clear()
    assert len(coordinator) == 0
    await coordinator.drain()

    assert action.calls == 1
    assert coordinator.entry(IM) is None
    assert coordinator.state_of(TV) is PrefetchState.IDLE


@pytest.mark.asyncio
async def test_sync_action_is_supported():
    coordinator = PrefetchCoordinator()
    seen = []

    await coordinator.batch([IM], lambda survivors: seen.extend(survivors))

    assert seen == [IM]
    stats = coordinator.stats()
    assert stats["done"] == 1
    assert stats["entries"] == 1


@pytest.mark.asyncio
async def test_late_failure_after_clear_does_not_touch_new_request():
    coordinator = PrefetchCoordinator()
    stale = CallCounter(delay=0.03, error=FetchFailure("old request failed"))
    fresh = CallCounter(delay=0.08)

    coordinator.batch([IM], stale)
    coordinator.clear()
    assert coordinator.batch([IM], fresh) is not None

    await asyncio.sleep(0.05)
    assert stale.calls == 1
    assert coordinator.state_of(IM) is PrefetchState.INFLIGHT
    assert coordinator.batch([IM], CallCounter()) is None

    await coordinator.drain()
    assert fresh.calls == 1
    assert coordinator.state_of(IM) is PrefetchState.DONE


@pytest.mark.asyncio
async def test_generation_keeps_growing_across_clear():
    coordinator = PrefetchCoordinator()
    await coordinator.batch([IM], CallCounter())
    first = coordinator.entry(IM).generation

    coordinator.clear()
    await coordinator.batch([IM], CallCounter())

    assert coordinator.entry(IM).generation > first


@pytest.mark.asyncio
async def test_done_without_expiry_is_eligible_again():
    coordinator = PrefetchCoordinator()
    await coordinator.batch([IM], CallCounter())
    coordinator.entry(IM).expires_at = None

    assert coordinator.should_prefetch(IM)


@pytest.mark.asyncio
async def test_invalid_transition_is_rejected_without_mutation():
    coordinator = PrefetchCoordinator()
    coordinator.schedule_prefetch(IM, 1000, CallCounter())
    entry = coordinator.entry(IM)
    entry.clear_timer()

    with pytest.raises(RuntimeError):
        coordinator._transition(entry, PrefetchState.DONE)
    assert entry.state is PrefetchState.SCHEDULED

    coordinator.cancel(IM)
    assert entry.state is PrefetchState.IDLE
