"""Observer registration and synchronous fan-out."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

from pyguia.exceptions import InvalidArgumentError, ObserverFailure

_logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(eq=False, slots=True)
class _Registration(Generic[T]):
    """One subscription.  Identity-compared so the same callable may register twice."""

    observer: Callable[[T], None]


class NotificationBus(Generic[T]):
    """Fan out immutable snapshots to subscribed observers.

    Observers run synchronously, in subscription order, over a snapshot of
    the subscriber list taken when :meth:`notify` starts.  Subscribing or
    unsubscribing from inside an observer therefore affects the next
    notification only.
    """

    def __init__(self, name: str = "bus") -> None:
        self._name = name
        self._registrations: tuple[_Registration[T], ...] = ()

    @property
    def observer_count(self) -> int:
        return len(self._registrations)

    def subscribe(self, observer: Callable[[T], None]) -> Callable[[], None]:
        """Register *observer* and return an idempotent unsubscribe callable."""
        if not callable(observer):
            raise InvalidArgumentError(
                f"observer must be callable, got {type(observer).__name__}",
                argument="observer",
            )
        registration: _Registration[T] = _Registration(observer)
        self._registrations = (*self._registrations, registration)

        def unsubscribe() -> None:
            self._registrations = tuple(r for r in self._registrations if r is not registration)

        return unsubscribe

    def notify(self, payload: T | None) -> None:
        """Deliver *payload* to every observer; ``None`` is not delivered."""
        if payload is None:
            return
        for registration in self._registrations:
            try:
                registration.observer(payload)
            except Exception as err:
                failure = ObserverFailure(registration.observer, err)
                _logger.warning("%s: %s", self._name, failure, exc_info=err)

    def clear(self) -> None:
        self._registrations = ()
