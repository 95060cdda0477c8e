"""Data models for pyguia."""

from pyguia.models._base import GuiaBaseModel
from pyguia.models.address import AddressField, AddressSnapshot
from pyguia.models.position import Position, accuracy_quality, haversine_distance
from pyguia.models.speech import PriorityRank, QueueItem, SpeechConfig, SpeechState, VoiceDescriptor

__all__ = [
    "AddressField",
    "AddressSnapshot",
    "GuiaBaseModel",
    "Position",
    "PriorityRank",
    "QueueItem",
    "SpeechConfig",
    "SpeechState",
    "VoiceDescriptor",
    "accuracy_quality",
    "haversine_distance",
]
