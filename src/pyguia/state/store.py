"""In-memory location store.

The only component allowed to replace the tracked position and the
current/previous address pair.  It is constructed explicitly by the
composition root and passed by reference; there is no global instance.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from pyguia._redact import redact_for_log
from pyguia.bus import NotificationBus
from pyguia.config import GuiaConfig
from pyguia.models.address import AddressSnapshot
from pyguia.models.position import Position
from pyguia.state.events import PositionEvent, PositionEventKind, RejectionReason
from pyguia.state.policy import evaluate

_logger = logging.getLogger(__name__)


class LocationStore:
    """Tracks the last accepted position and the two latest addresses.

    Position observers receive a :class:`PositionEvent` for every valid
    fix offered, including rejected ones (``not_updated``) so a UI can
    show feedback.
    """

    def __init__(self, config: GuiaConfig | None = None) -> None:
        self._config = config or GuiaConfig()
        self._position: Position | None = None
        self._current_address: AddressSnapshot | None = None
        self._previous_address: AddressSnapshot | None = None
        self.positions: NotificationBus[PositionEvent] = NotificationBus("positions")

    # ------------------------------------------------------------------
    # Position
    # ------------------------------------------------------------------

    @property
    def position(self) -> Position | None:
        return self._position

    def update_position(self, record: Position | Mapping[str, Any]) -> PositionEvent | None:
        """Offer a fix; returns the published event, or ``None`` for invalid input."""
        try:
            candidate = record if isinstance(record, Position) else Position.model_validate(dict(record))
        except (ValidationError, TypeError, ValueError):
            _logger.warning("Ignoring invalid position record: %s", redact_for_log(record))
            return None

        quality = candidate.accuracy_quality
        if quality in self._config.not_accepted_accuracy:
            _logger.debug("Position rejected, accuracy %s (%s)", candidate.accuracy, quality)
            event = PositionEvent(
                kind=PositionEventKind.NOT_UPDATED,
                position=self._position,
                candidate=candidate,
                reason=RejectionReason.ACCURACY,
            )
            self.positions.notify(event)
            return event

        decision = evaluate(
            candidate,
            self._position,
            self._config.tracking_interval_ms,
            self._config.minimum_distance_change,
        )
        if not decision.accept:
            _logger.debug(
                "Position not significant distance=%.1fm elapsed=%.0fms",
                decision.distance_meters,
                decision.elapsed_ms,
            )
            event = PositionEvent(
                kind=PositionEventKind.NOT_UPDATED,
                position=self._position,
                candidate=candidate,
                distance_meters=decision.distance_meters,
                elapsed_ms=decision.elapsed_ms,
                reason=RejectionReason.DISTANCE_AND_TIME,
            )
            self.positions.notify(event)
            return event

        if decision.first_fix or decision.time_threshold_met:
            kind = PositionEventKind.UPDATED
        else:
            kind = PositionEventKind.IMMEDIATE_ADDRESS_UPDATE

        self._position = candidate
        _logger.debug("Position accepted kind=%s %s", kind, redact_for_log(candidate))
        event = PositionEvent(
            kind=kind,
            position=candidate,
            candidate=candidate,
            distance_meters=decision.distance_meters,
            elapsed_ms=decision.elapsed_ms,
        )
        self.positions.notify(event)
        return event

    def clear_position(self) -> None:
        """Forget the tracked position.  Observers are not notified."""
        self._position = None

    # ------------------------------------------------------------------
    # Address
    # ------------------------------------------------------------------

    @property
    def current_address(self) -> AddressSnapshot | None:
        return self._current_address

    @property
    def previous_address(self) -> AddressSnapshot | None:
        return self._previous_address

    def update_address(self, address: AddressSnapshot) -> tuple[AddressSnapshot, AddressSnapshot | None]:
        """Make *address* current; the former current becomes previous.

        Returns ``(current, previous)``.
        """
        previous = self._current_address
        self._previous_address, self._current_address = previous, address
        return address, previous

    def clear_address(self) -> None:
        self._current_address = None
        self._previous_address = None
