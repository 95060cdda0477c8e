"""Playback state machine driving the external speech engine.

States::

    IDLE --speak--> SPEAKING --engine end/error--> IDLE (drain next)
    SPEAKING --pause--> PAUSED --resume--> SPEAKING
    any --stop--> IDLE (queue cleared)

Only one utterance is in flight.  New requests while busy are queued;
order is decided entirely by queue rank.
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Callable
from typing import Any

from pyguia.bus import NotificationBus
from pyguia.exceptions import UnsupportedEnvironmentError
from pyguia.models.speech import QueueItem, SpeechConfig, SpeechState, VoiceDescriptor
from pyguia.speech.configuration import SpeechConfiguration
from pyguia.speech.engine import SpeechEngine, UtteranceCallbacks, UtteranceConfig
from pyguia.speech.queue import SpeechPriorityQueue
from pyguia.speech.voices import VoiceResolver
from pyguia.state.events import SpeechStatus

_logger = logging.getLogger(__name__)


class SpeechPlaybackController:
    """Drains a :class:`SpeechPriorityQueue` one item at a time through an engine."""

    def __init__(
        self,
        engine: SpeechEngine | None,
        *,
        configuration: SpeechConfiguration | None = None,
        queue: SpeechPriorityQueue | None = None,
        voices: VoiceResolver | None = None,
        queue_timer_interval: float = 5.0,
    ) -> None:
        if engine is None:
            raise UnsupportedEnvironmentError("Speech engine not available in this environment")
        self._engine = engine
        self._configuration = configuration or SpeechConfiguration()
        self._queue = queue or SpeechPriorityQueue()
        self._voices = voices or VoiceResolver(engine.get_voices)
        self._queue_timer_interval = queue_timer_interval
        self._state = SpeechState.IDLE
        self._current: QueueItem | None = None
        self._tokens = itertools.count(1)
        self._active_token: int | None = None
        self.status: NotificationBus[SpeechStatus] = NotificationBus("speech")

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def state(self) -> SpeechState:
        return self._state

    @property
    def queue(self) -> SpeechPriorityQueue:
        return self._queue

    @property
    def voices(self) -> VoiceResolver:
        return self._voices

    @property
    def current_item(self) -> QueueItem | None:
        return self._current

    def is_speaking(self) -> bool:
        """True while an utterance is in flight (speaking or paused)."""
        return self._state != SpeechState.IDLE

    def get_queue_size(self) -> int:
        return self._queue.size()

    def get_status(self) -> SpeechStatus:
        config = self._configuration.get_configuration()
        return SpeechStatus(
            state=self._state,
            queue_size=self._queue.size(),
            current_text=self._current.text if self._current is not None else None,
            voice=self._voices.selected_voice,
            rate=config.rate,
            pitch=config.pitch,
            queue_timer_active=self._queue.timer_active,
        )

    def subscribe(self, observer: Callable[[SpeechStatus], None]) -> Callable[[], None]:
        return self.status.subscribe(observer)

    def _publish(self) -> None:
        self.status.notify(self.get_status())

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def set_rate(self, rate: Any) -> float:
        value = self._configuration.set_rate(rate)
        self._publish()
        return value

    def set_pitch(self, pitch: Any) -> float:
        value = self._configuration.set_pitch(pitch)
        self._publish()
        return value

    def get_configuration(self) -> SpeechConfig:
        return self._configuration.get_configuration()

    def reset_configuration(self) -> None:
        self._configuration.reset()
        self._publish()

    # ------------------------------------------------------------------
    # Queueing and draining
    # ------------------------------------------------------------------

    def enqueue(self, text: str, priority_rank: int = 0) -> QueueItem:
        """Queue an announcement and start it right away when idle."""
        item = self._queue.enqueue(text, priority_rank)
        _logger.debug("Queued %s (size: %d)", item, self._queue.size())
        self._publish()
        if self._state == SpeechState.IDLE:
            self.process_queue()
        return item

    def speak(self, text: str, priority_rank: int = 0) -> QueueItem:
        """Alias of :meth:`enqueue`; never preempts the current utterance."""
        return self.enqueue(text, priority_rank)

    def process_queue(self) -> QueueItem | None:
        """Start the next item if idle.  Returns the item started, if any."""
        while self._state == SpeechState.IDLE:
            item = self._queue.dequeue_next()
            if item is None:
                return None
            voice = self._voices.selected_voice
            if voice is None:
                _logger.debug("No voice selected; skipping %s", item)
                self._publish()
                continue
            self._start(item, voice)
            return item
        return None

    def _start(self, item: QueueItem, voice: VoiceDescriptor) -> None:
        token = next(self._tokens)
        self._active_token = token
        self._current = item
        self._state = SpeechState.SPEAKING
        config = self._configuration.get_configuration()
        utterance = UtteranceConfig(text=item.text, voice=voice, rate=config.rate, pitch=config.pitch)
        callbacks = UtteranceCallbacks(
            on_end=lambda: self._finish(token),
            on_error=lambda error: self._finish(token, error),
        )
        self._publish()
        if token != self._active_token:
            # An observer stopped playback while being notified.
            _logger.debug("Utterance %s superseded before it started", item)
            return
        _logger.debug("Speaking %s voice=%s rate=%s pitch=%s", item, voice.name, config.rate, config.pitch)
        try:
            self._engine.speak(utterance, callbacks)
        except Exception as err:
            _logger.warning("Failed to start utterance for %s", item, exc_info=True)
            self._finish(token, repr(err))

    def _finish(self, token: int, error: str | None = None) -> None:
        if token != self._active_token:
            _logger.debug("Ignoring completion of superseded utterance %d", token)
            return
        if error is not None:
            _logger.warning("Speech error for %s: %s", self._current, error)
        else:
            _logger.debug("Speech completed: %s", self._current)
        self._active_token = None
        self._current = None
        self._state = SpeechState.IDLE
        self._publish()
        self.process_queue()

    def _on_tick(self) -> None:
        if self._state == SpeechState.IDLE and not self._queue.is_empty():
            self.process_queue()

    # ------------------------------------------------------------------
    # Playback control
    # ------------------------------------------------------------------

    def pause(self) -> bool:
        if self._state != SpeechState.SPEAKING:
            _logger.debug("No active speech to pause")
            return False
        try:
            self._engine.pause()
        except Exception:
            _logger.warning("Failed to pause speech", exc_info=True)
            return False
        self._state = SpeechState.PAUSED
        self._publish()
        return True

    def resume(self) -> bool:
        if self._state != SpeechState.PAUSED:
            _logger.debug("No paused speech to resume")
            return False
        try:
            self._engine.resume()
        except Exception:
            _logger.warning("Failed to resume speech", exc_info=True)
            return False
        self._state = SpeechState.SPEAKING
        self._publish()
        return True

    def stop(self) -> int:
        """Cancel the current utterance and drop everything queued.

        Returns the number of queued items dropped.
        """
        # Invalidate first so a synchronous engine callback from cancel() is ignored.
        self._active_token = None
        try:
            self._engine.cancel()
        except Exception:
            _logger.debug("Engine cancel failed", exc_info=True)
        dropped = self._queue.clear()
        self._current = None
        self._state = SpeechState.IDLE
        _logger.debug("Speech stopped and queue cleared (%d items removed)", dropped)
        self._publish()
        return dropped

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start_queue_timer(self, interval: float | None = None) -> None:
        """Drain the queue periodically (needs a running event loop)."""
        if interval is not None:
            self._queue_timer_interval = interval
        self._queue.start_timer(self._queue_timer_interval, self._on_tick)

    def stop_queue_timer(self) -> None:
        self._queue.stop_timer()

    def close(self) -> None:
        """Stop the timer and any playback."""
        self.stop_queue_timer()
        self.stop()
        self.status.clear()

    def __repr__(self) -> str:
        voice = self._voices.selected_voice
        config = self._configuration.get_configuration()
        return (
            f"SpeechPlaybackController(voice={voice.name if voice else 'none'}, rate={config.rate}, "
            f"pitch={config.pitch}, state={self._state}, queue_size={self._queue.size()})"
        )
