"""Ranked queue of pending announcements plus its drain timer."""

from __future__ import annotations

import bisect
import itertools
import logging
import time
from collections.abc import Callable

from pyguia._timers import IntervalTask
from pyguia.exceptions import InvalidArgumentError
from pyguia.models.speech import QueueItem

_logger = logging.getLogger(__name__)


class SpeechPriorityQueue:
    """Passive ordered container.

    Items are kept sorted by rank (descending) and enqueue time
    (ascending).  The queue holds no concurrency of its own; the interval
    timer only invokes the owner's tick callback.

    Parameters
    ----------
    max_size : int
        Upper bound on pending items; the lowest ranked, newest item is
        dropped when exceeded.
    item_ttl : float or None
        Seconds after which a pending item is discarded unspoken.
    clock : callable
        Monotonic clock in seconds.
    """

    def __init__(
        self,
        *,
        max_size: int = 100,
        item_ttl: float | None = 30.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_size < 1:
            raise ValueError(f"max_size must be >= 1, got {max_size}")
        self._max_size = max_size
        self._item_ttl = item_ttl
        self._clock = clock
        self._items: list[QueueItem] = []
        self._sequence = itertools.count()
        self._timer: IntervalTask | None = None

    def enqueue(self, text: str, priority_rank: int = 0) -> QueueItem:
        """Insert an announcement; equal ranks keep FIFO order."""
        if not isinstance(text, str):
            raise InvalidArgumentError(f"text must be a string, got {type(text).__name__}", argument="text")
        if not text.strip():
            raise InvalidArgumentError("text cannot be empty or only whitespace", argument="text")
        if isinstance(priority_rank, bool) or not isinstance(priority_rank, int):
            raise InvalidArgumentError(
                f"priority_rank must be an integer, got {priority_rank!r}",
                argument="priority_rank",
            )

        self._purge_expired()
        item = QueueItem(
            text=text.strip(),
            priority_rank=int(priority_rank),
            enqueued_at=self._clock(),
            sequence=next(self._sequence),
        )
        bisect.insort(self._items, item, key=QueueItem.sort_key)

        if len(self._items) > self._max_size:
            dropped = self._items.pop()
            _logger.debug("Queue full (%d); dropped %s", self._max_size, dropped)
        return item

    def dequeue_next(self) -> QueueItem | None:
        """Remove and return the highest ranked, oldest item."""
        self._purge_expired()
        if not self._items:
            return None
        return self._items.pop(0)

    def peek(self) -> QueueItem | None:
        self._purge_expired()
        return self._items[0] if self._items else None

    def clear(self) -> int:
        """Drop every pending item; returns how many were dropped."""
        removed = len(self._items)
        self._items = []
        return removed

    def size(self) -> int:
        self._purge_expired()
        return len(self._items)

    def is_empty(self) -> bool:
        return self.size() == 0

    def has_pending_above(self, priority_rank: int) -> bool:
        """True if any pending item outranks *priority_rank*."""
        head = self.peek()
        return head is not None and head.priority_rank > priority_rank

    def items(self) -> list[QueueItem]:
        """Pending items in drain order (copy)."""
        self._purge_expired()
        return list(self._items)

    def _purge_expired(self) -> None:
        if self._item_ttl is None or not self._items:
            return
        now = self._clock()
        kept = [item for item in self._items if not item.is_expired(self._item_ttl, now)]
        removed = len(self._items) - len(kept)
        if removed:
            self._items = kept
            _logger.debug("Removed %d expired queue items", removed)

    # ------------------------------------------------------------------
    # Drain timer
    # ------------------------------------------------------------------

    @property
    def timer_active(self) -> bool:
        return self._timer is not None and self._timer.active

    def start_timer(self, interval: float, on_tick: Callable[[], None]) -> None:
        """Call *on_tick* every *interval* seconds until :meth:`stop_timer`."""
        self.stop_timer()
        self._timer = IntervalTask(interval, on_tick, name="speech-queue")
        self._timer.start()

    def stop_timer(self) -> None:
        timer = self._timer
        self._timer = None
        if timer is not None:
            timer.cancel()

    def __len__(self) -> int:
        return self.size()

    def __repr__(self) -> str:
        return f"SpeechPriorityQueue(size={len(self._items)}, max_size={self._max_size}, ttl={self._item_ttl})"
