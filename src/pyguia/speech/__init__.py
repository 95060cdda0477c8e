"""Spoken announcement pipeline."""

from pyguia.speech.announcements import (
    build_change_announcement,
    build_district_announcement,
    build_full_address_announcement,
    build_municipality_announcement,
    build_street_announcement,
)
from pyguia.speech.configuration import SpeechConfiguration
from pyguia.speech.controller import SpeechPlaybackController
from pyguia.speech.engine import SpeechEngine, UtteranceCallbacks, UtteranceConfig
from pyguia.speech.queue import SpeechPriorityQueue
from pyguia.speech.voices import VoiceResolver, score_voice, select_voice

__all__ = [
    "SpeechConfiguration",
    "SpeechEngine",
    "SpeechPlaybackController",
    "SpeechPriorityQueue",
    "UtteranceCallbacks",
    "UtteranceConfig",
    "VoiceResolver",
    "build_change_announcement",
    "build_district_announcement",
    "build_full_address_announcement",
    "build_municipality_announcement",
    "build_street_announcement",
    "score_voice",
    "select_voice",
]
