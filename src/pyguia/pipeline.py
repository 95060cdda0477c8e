"""Composition root wiring position arbitration, change detection and speech."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from pyguia._timers import IntervalTask
from pyguia.bus import NotificationBus
from pyguia.config import GuiaConfig
from pyguia.models.address import AddressField, AddressSnapshot
from pyguia.models.position import Position
from pyguia.models.speech import PriorityRank, QueueItem, SpeechConfig
from pyguia.speech.announcements import build_change_announcement, build_full_address_announcement
from pyguia.speech.controller import SpeechPlaybackController
from pyguia.speech.engine import SpeechEngine
from pyguia.speech.queue import SpeechPriorityQueue
from pyguia.speech.voices import VoiceResolver
from pyguia.state.changes import ChangeDetector
from pyguia.state.events import AddressChangeEvent, PositionEvent, SpeechStatus
from pyguia.state.store import LocationStore

_logger = logging.getLogger(__name__)


class GuiaPipeline:
    """Tracks an observer and announces significant address changes.

    Usage::

        async with GuiaPipeline(engine, GuiaConfig()) as guia:
            guia.subscribe_speech(print)
            guia.submit_position(fix)
            guia.submit_address({"municipio": "Serro", "bairro": "Milho Verde"})
    """

    def __init__(
        self,
        engine: SpeechEngine | None,
        config: GuiaConfig | None = None,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._config = config or GuiaConfig()
        self.store = LocationStore(self._config)
        self.detector = ChangeDetector()
        self.address_changes: NotificationBus[AddressChangeEvent] = NotificationBus("address-changes")
        self.voices = VoiceResolver(
            engine.get_voices if engine is not None else None,
            primary_language=self._config.primary_language,
            fallback_language_prefix=self._config.fallback_language_prefix,
            max_retries=self._config.voice_max_retries,
            initial_delay=self._config.voice_initial_delay,
            max_delay=self._config.voice_max_delay,
            sleep=sleep,
        )
        self.speech = SpeechPlaybackController(
            engine,
            queue=SpeechPriorityQueue(
                max_size=self._config.queue_max_size,
                item_ttl=self._config.queue_item_ttl,
                clock=clock,
            ),
            voices=self.voices,
            queue_timer_interval=self._config.queue_timer_interval,
        )
        self._periodic: IntervalTask | None = None

    @property
    def config(self) -> GuiaConfig:
        return self._config

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> GuiaPipeline:
        await self.start()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()

    async def start(self) -> None:
        """Resolve a voice and start the queue and periodic timers."""
        await self.voices.resolve()
        self.speech.start_queue_timer()
        if self._periodic is not None:
            self._periodic.cancel()
            self._periodic = None
        if self._config.full_address_interval > 0:
            self._periodic = IntervalTask(
                self._config.full_address_interval,
                self._on_periodic_tick,
                name="full-address",
            )
            self._periodic.start()

    async def close(self) -> None:
        periodic = self._periodic
        self._periodic = None
        if periodic is not None:
            await periodic.wait_cancelled()
        self.speech.close()

    # ------------------------------------------------------------------
    # Inputs
    # ------------------------------------------------------------------

    def submit_position(self, record: Position | Mapping[str, Any]) -> PositionEvent | None:
        """Offer a sensor fix; see :meth:`LocationStore.update_position`."""
        return self.store.update_position(record)

    def submit_address(
        self,
        address: AddressSnapshot | Mapping[str, Any],
        raw: dict[str, Any] | None = None,
    ) -> list[AddressChangeEvent]:
        """Accept the address resolved for the latest position.

        Fields are compared highest rank first; every transition that
        passes deduplication is published and queued for speech.
        """
        snapshot = address if isinstance(address, AddressSnapshot) else AddressSnapshot.model_validate(dict(address))
        current, previous = self.store.update_address(snapshot)

        events: list[AddressChangeEvent] = []
        for field in AddressField:
            if not self.detector.has_field_changed(field, current, previous):
                continue
            details = self.detector.get_change_details(
                field,
                current,
                previous,
                raw if raw is not None else current.raw,
                previous.raw if previous is not None else None,
            )
            text, rank = build_change_announcement(details)
            event = AddressChangeEvent(details=details, announcement=text, priority_rank=rank)
            _logger.debug("Address field %s changed: %r -> %r", field, details.from_value, details.to_value)
            self.address_changes.notify(event)
            self.speech.enqueue(text, rank)
            events.append(event)
        return events

    def announce_full_address(self) -> QueueItem | None:
        """Queue the full current address at the lowest rank."""
        address = self.store.current_address
        if address is None:
            return None
        text, rank = build_full_address_announcement(address)
        return self.speech.enqueue(text, rank)

    def _on_periodic_tick(self) -> None:
        if self.speech.queue.has_pending_above(PriorityRank.PERIODIC):
            _logger.debug("Skipping periodic announcement; change announcements pending")
            return
        self.announce_full_address()

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    def subscribe_positions(self, observer: Callable[[PositionEvent], None]) -> Callable[[], None]:
        return self.store.positions.subscribe(observer)

    def subscribe_address_changes(self, observer: Callable[[AddressChangeEvent], None]) -> Callable[[], None]:
        return self.address_changes.subscribe(observer)

    def subscribe_speech(self, observer: Callable[[SpeechStatus], None]) -> Callable[[], None]:
        return self.speech.subscribe(observer)

    def subscribe(self, observer: Callable[[Any], None]) -> Callable[[], None]:
        """Receive position, address-change and speech payloads alike."""
        disposers = [
            self.subscribe_positions(observer),
            self.subscribe_address_changes(observer),
            self.subscribe_speech(observer),
        ]

        def unsubscribe() -> None:
            for dispose in disposers:
                dispose()

        return unsubscribe

    # ------------------------------------------------------------------
    # Speech surface
    # ------------------------------------------------------------------

    def enqueue(self, text: str, priority_rank: int = 0) -> QueueItem:
        return self.speech.enqueue(text, priority_rank)

    def get_queue_size(self) -> int:
        return self.speech.get_queue_size()

    def is_speaking(self) -> bool:
        return self.speech.is_speaking()

    def set_rate(self, rate: Any) -> float:
        return self.speech.set_rate(rate)

    def set_pitch(self, pitch: Any) -> float:
        return self.speech.set_pitch(pitch)

    def get_configuration(self) -> SpeechConfig:
        return self.speech.get_configuration()

    def pause(self) -> bool:
        return self.speech.pause()

    def resume(self) -> bool:
        return self.speech.resume()

    def stop(self) -> int:
        return self.speech.stop()

    def clear_all_signatures(self) -> None:
        self.detector.clear_all_signatures()
