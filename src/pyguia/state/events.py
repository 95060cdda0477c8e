"""Immutable notification payloads.

Every observer registered on a :class:`pyguia.bus.NotificationBus`
receives one of these frozen models; none of them can be mutated by a
misbehaving observer.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from pyguia.models.address import AddressField, AddressSnapshot
from pyguia.models.position import Position
from pyguia.models.speech import SpeechState, VoiceDescriptor


class PositionEventKind(StrEnum):
    UPDATED = "updated"
    IMMEDIATE_ADDRESS_UPDATE = "immediate_address_update"
    NOT_UPDATED = "not_updated"


class RejectionReason(StrEnum):
    ACCURACY = "accuracy"
    DISTANCE_AND_TIME = "distance_and_time"


class PositionEvent(BaseModel):
    """Outcome of offering one fix to the location store."""

    model_config = ConfigDict(frozen=True)

    kind: PositionEventKind
    position: Position | None = Field(default=None, description="Last accepted position after this event")
    candidate: Position
    distance_meters: float | None = None
    elapsed_ms: float | None = None
    reason: RejectionReason | None = None
    observed_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def accepted(self) -> bool:
        return self.kind != PositionEventKind.NOT_UPDATED


class ChangeDetails(BaseModel):
    """Transition of one address field between two snapshots."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    field: AddressField
    from_value: str | None = Field(default=None, alias="from")
    to_value: str | None = Field(default=None, alias="to")
    previous_address: AddressSnapshot | None = None
    current_address: AddressSnapshot | None = None
    current_raw_data: dict[str, Any] | None = None
    previous_raw_data: dict[str, Any] | None = None


class AddressChangeEvent(BaseModel):
    """A field transition that passed deduplication."""

    model_config = ConfigDict(frozen=True)

    details: ChangeDetails
    announcement: str
    priority_rank: int
    observed_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def field(self) -> AddressField:
        return self.details.field


class SpeechStatus(BaseModel):
    """Snapshot of the playback controller."""

    model_config = ConfigDict(frozen=True)

    state: SpeechState
    queue_size: int
    current_text: str | None = None
    voice: VoiceDescriptor | None = None
    rate: float
    pitch: float
    queue_timer_active: bool = False

    @property
    def is_speaking(self) -> bool:
        return self.state != SpeechState.IDLE
