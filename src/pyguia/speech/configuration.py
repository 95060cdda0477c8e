"""Validated, clamped speech rate/pitch."""

from __future__ import annotations

import logging
from typing import Any

from pyguia._constants import DEFAULT_PITCH, DEFAULT_RATE, MAX_PITCH, MAX_RATE, MIN_PITCH, MIN_RATE, clamp
from pyguia._normalize import is_real_number
from pyguia.exceptions import InvalidArgumentError
from pyguia.models.speech import SpeechConfig

_logger = logging.getLogger(__name__)


def _require_number(value: Any, name: str) -> float:
    if not is_real_number(value):
        raise InvalidArgumentError(f"{name} must be a valid number, got {value!r}", argument=name)
    return float(value)


class SpeechConfiguration:
    """Holds the rate/pitch applied to the next utterance.

    Out-of-range numbers are clamped; non-numbers (and NaN) are rejected
    without touching the stored value.
    """

    def __init__(self) -> None:
        self._rate = DEFAULT_RATE
        self._pitch = DEFAULT_PITCH

    @property
    def rate(self) -> float:
        return self._rate

    @property
    def pitch(self) -> float:
        return self._pitch

    def set_rate(self, rate: Any) -> float:
        value = _require_number(rate, "rate")
        clamped = clamp(value, MIN_RATE, MAX_RATE)
        if clamped != value:
            _logger.warning("Rate %s clamped to %s (valid range: %s-%s)", value, clamped, MIN_RATE, MAX_RATE)
        self._rate = clamped
        return clamped

    def set_pitch(self, pitch: Any) -> float:
        value = _require_number(pitch, "pitch")
        clamped = clamp(value, MIN_PITCH, MAX_PITCH)
        if clamped != value:
            _logger.warning("Pitch %s clamped to %s (valid range: %s-%s)", value, clamped, MIN_PITCH, MAX_PITCH)
        self._pitch = clamped
        return clamped

    def get_configuration(self) -> SpeechConfig:
        return SpeechConfig(rate=self._rate, pitch=self._pitch)

    def reset(self) -> None:
        self._rate = DEFAULT_RATE
        self._pitch = DEFAULT_PITCH
        _logger.debug("Speech configuration reset to defaults")

    @staticmethod
    def rate_range() -> tuple[float, float, float]:
        """``(min, max, default)``"""
        return (MIN_RATE, MAX_RATE, DEFAULT_RATE)

    @staticmethod
    def pitch_range() -> tuple[float, float, float]:
        return (MIN_PITCH, MAX_PITCH, DEFAULT_PITCH)
