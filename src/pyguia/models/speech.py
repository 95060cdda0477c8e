"""Speech pipeline models."""

from __future__ import annotations

import time
from enum import IntEnum, StrEnum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from pyguia._constants import DEFAULT_PITCH, DEFAULT_RATE, MAX_PITCH, MAX_RATE, MIN_PITCH, MIN_RATE
from pyguia._normalize import normalize_language_tag


class PriorityRank(IntEnum):
    """Announcement ranks; a higher value speaks first.

    ``PERIODIC`` sits below every change-driven rank so change
    announcements are never starved by the full-address reminder.
    """

    PERIODIC = -1
    STREET = 0
    DISTRICT = 1
    MUNICIPALITY = 2


class SpeechState(StrEnum):
    IDLE = "idle"
    SPEAKING = "speaking"
    PAUSED = "paused"


class QueueItem(BaseModel):
    """One pending announcement."""

    model_config = ConfigDict(frozen=True)

    text: str
    priority_rank: int
    enqueued_at: float = Field(default_factory=time.monotonic)
    sequence: int = 0

    def sort_key(self) -> tuple[int, float, int]:
        """Rank descending, then enqueue order ascending."""
        return (-self.priority_rank, self.enqueued_at, self.sequence)

    def is_expired(self, ttl: float, now: float) -> bool:
        return now - self.enqueued_at > ttl

    def __str__(self) -> str:
        text = self.text if len(self.text) <= 50 else f"{self.text[:50]}..."
        return f'QueueItem("{text}", rank={self.priority_rank})'


class VoiceDescriptor(BaseModel):
    """Voice offered by the speech engine.  Opaque beyond these fields."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    name: str = ""
    language_tag: str = Field(default="", validation_alias=AliasChoices("language_tag", "lang", "languageTag"))
    is_local: bool = Field(default=False, validation_alias=AliasChoices("is_local", "isLocal", "localService"))

    @field_validator("name", "language_tag", mode="before")
    @classmethod
    def _coerce_str(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @property
    def normalized_language(self) -> str:
        return normalize_language_tag(self.language_tag)


class SpeechConfig(BaseModel):
    """Rate/pitch snapshot applied to an utterance."""

    model_config = ConfigDict(frozen=True)

    rate: float = Field(default=DEFAULT_RATE, ge=MIN_RATE, le=MAX_RATE)
    pitch: float = Field(default=DEFAULT_PITCH, ge=MIN_PITCH, le=MAX_PITCH)
