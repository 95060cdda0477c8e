from __future__ import annotations

import asyncio

import pytest

from pyguia.exceptions import InvalidArgumentError
from pyguia.models.speech import PriorityRank
from pyguia.speech.queue import SpeechPriorityQueue


class _FakeClock:
    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now


def _drain(queue: SpeechPriorityQueue) -> list[str]:
    texts: list[str] = []
    while (item := queue.dequeue_next()) is not None:
        texts.append(item.text)
    return texts


class TestOrdering:
    def test_higher_rank_drains_first(self) -> None:
        queue = SpeechPriorityQueue()
        for rank in (0, 2, 1):
            queue.enqueue(f"rank {rank}", rank)
        assert _drain(queue) == ["rank 2", "rank 1", "rank 0"]

    def test_equal_ranks_keep_fifo_order(self) -> None:
        # A frozen clock makes every timestamp equal; the sequence breaks ties.
        queue = SpeechPriorityQueue(clock=_FakeClock())
        queue.enqueue("first", 1)
        queue.enqueue("second", 1)
        queue.enqueue("third", 1)
        assert _drain(queue) == ["first", "second", "third"]

    def test_periodic_rank_drains_last(self) -> None:
        queue = SpeechPriorityQueue()
        queue.enqueue("full address", PriorityRank.PERIODIC)
        queue.enqueue("street", PriorityRank.STREET)
        queue.enqueue("municipality", PriorityRank.MUNICIPALITY)
        assert _drain(queue) == ["municipality", "street", "full address"]

    def test_dequeue_on_empty_queue_returns_none(self) -> None:
        queue = SpeechPriorityQueue()
        assert queue.dequeue_next() is None
        assert queue.peek() is None
        assert queue.is_empty() is True

    def test_has_pending_above(self) -> None:
        queue = SpeechPriorityQueue()
        assert queue.has_pending_above(PriorityRank.PERIODIC) is False
        queue.enqueue("full address", PriorityRank.PERIODIC)
        assert queue.has_pending_above(PriorityRank.PERIODIC) is False
        queue.enqueue("street", PriorityRank.STREET)
        assert queue.has_pending_above(PriorityRank.PERIODIC) is True


class TestValidation:
    @pytest.mark.parametrize("text", ["", "   ", None, 42])
    def test_invalid_text_is_rejected_without_mutation(self, text: object) -> None:
        queue = SpeechPriorityQueue()
        queue.enqueue("ok", 0)
        with pytest.raises(InvalidArgumentError):
            queue.enqueue(text, 0)  # type: ignore[arg-type]
        assert queue.size() == 1

    @pytest.mark.parametrize("rank", [1.5, "2", True, None])
    def test_invalid_rank_is_rejected(self, rank: object) -> None:
        queue = SpeechPriorityQueue()
        with pytest.raises(InvalidArgumentError):
            queue.enqueue("text", rank)  # type: ignore[arg-type]
        assert queue.is_empty()

    def test_text_is_stripped(self) -> None:
        queue = SpeechPriorityQueue()
        item = queue.enqueue("  Você está em Lapa  ", 0)
        assert item.text == "Você está em Lapa"

    def test_max_size_must_be_positive(self) -> None:
        with pytest.raises(ValueError):
            SpeechPriorityQueue(max_size=0)


class TestBounds:
    def test_overflow_drops_lowest_ranked_newest(self) -> None:
        queue = SpeechPriorityQueue(max_size=2)
        queue.enqueue("low", 0)
        queue.enqueue("high", 2)
        queue.enqueue("newest low", 0)
        assert [item.text for item in queue.items()] == ["high", "low"]

    def test_overflow_keeps_incoming_high_rank(self) -> None:
        queue = SpeechPriorityQueue(max_size=2)
        queue.enqueue("a", 0)
        queue.enqueue("b", 0)
        queue.enqueue("urgent", 2)
        assert [item.text for item in queue.items()] == ["urgent", "a"]

    def test_expired_items_are_purged(self) -> None:
        clock = _FakeClock()
        queue = SpeechPriorityQueue(item_ttl=30.0, clock=clock)
        queue.enqueue("old", 2)
        clock.now = 20.0
        queue.enqueue("fresh", 0)

        clock.now = 31.0
        assert queue.size() == 1
        assert queue.dequeue_next().text == "fresh"  # type: ignore[union-attr]

    def test_ttl_none_never_expires(self) -> None:
        clock = _FakeClock()
        queue = SpeechPriorityQueue(item_ttl=None, clock=clock)
        queue.enqueue("kept", 0)
        clock.now = 10_000.0
        assert queue.size() == 1

    def test_clear_returns_dropped_count(self) -> None:
        queue = SpeechPriorityQueue()
        queue.enqueue("a", 0)
        queue.enqueue("b", 1)
        assert queue.clear() == 2
        assert queue.is_empty()
        assert len(queue) == 0

    def test_items_is_a_copy(self) -> None:
        queue = SpeechPriorityQueue()
        queue.enqueue("a", 0)
        queue.items().clear()
        assert queue.size() == 1


class TestTimer:
    @pytest.mark.asyncio
    async def test_timer_ticks_until_stopped(self) -> None:
        queue = SpeechPriorityQueue()
        ticks: list[int] = []

        queue.start_timer(0.01, lambda: ticks.append(1))
        assert queue.timer_active is True
        await asyncio.sleep(0.055)
        queue.stop_timer()
        seen = len(ticks)
        await asyncio.sleep(0.03)

        assert seen >= 2
        assert len(ticks) == seen
        assert queue.timer_active is False

    @pytest.mark.asyncio
    async def test_failing_tick_does_not_stop_timer(self) -> None:
        queue = SpeechPriorityQueue()
        ticks: list[int] = []

        def tick() -> None:
            ticks.append(1)
            raise RuntimeError("tick failed")

        queue.start_timer(0.01, tick)
        await asyncio.sleep(0.045)
        queue.stop_timer()
        assert len(ticks) >= 2

    @pytest.mark.asyncio
    async def test_restart_replaces_previous_timer(self) -> None:
        queue = SpeechPriorityQueue()
        first: list[int] = []
        second: list[int] = []

        queue.start_timer(0.01, lambda: first.append(1))
        queue.start_timer(0.01, lambda: second.append(1))
        await asyncio.sleep(0.035)
        queue.stop_timer()

        assert first == []
        assert len(second) >= 1

    def test_start_timer_requires_running_loop(self) -> None:
        queue = SpeechPriorityQueue()
        with pytest.raises(RuntimeError):
            queue.start_timer(1.0, lambda: None)
        assert queue.timer_active is False
