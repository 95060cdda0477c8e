"""Contract consumed from the host text-to-speech engine.

pyguia never synthesizes audio itself.  The host supplies an object
implementing :class:`SpeechEngine`; a browser bridge, ``pyttsx3`` or a
test double all fit.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from pyguia.models.speech import VoiceDescriptor


@dataclass(frozen=True, slots=True)
class UtteranceConfig:
    """Everything the engine needs to speak one utterance."""

    text: str
    voice: VoiceDescriptor | None
    rate: float
    pitch: float


@dataclass(frozen=True, slots=True)
class UtteranceCallbacks:
    """Completion hooks.  The engine calls exactly one of them per utterance."""

    on_end: Callable[[], None]
    on_error: Callable[[str], None]


@runtime_checkable
class SpeechEngine(Protocol):
    def get_voices(self) -> Sequence[VoiceDescriptor]:
        """Current voice inventory; may be empty until the engine is ready."""
        ...

    def speak(self, config: UtteranceConfig, callbacks: UtteranceCallbacks) -> None: ...

    def cancel(self) -> None: ...

    def pause(self) -> None: ...

    def resume(self) -> None: ...
