"""Voice inventory acquisition and selection.

Host engines often populate their voice list asynchronously, so the
first inventory query may come back empty.  :class:`VoiceResolver`
retries with a doubling, capped backoff and shares one in-flight load
between concurrent callers.

Selection cascade:

  1. Exact (case-insensitive) match on the primary tag, local preferred
  2. Prefix match on the fallback language, local preferred
  3. First voice in inventory order
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence

from pyguia._normalize import normalize_language_tag
from pyguia.exceptions import UnsupportedEnvironmentError
from pyguia.models.speech import VoiceDescriptor

_logger = logging.getLogger(__name__)

_LOCAL_SCORE = 10
_PRIMARY_SCORE = 20

VoiceInventory = Callable[[], Sequence[VoiceDescriptor]]


def score_voice(voice: VoiceDescriptor, primary_language_tag: str) -> int:
    """Local + primary (30) > primary (20) > local (10) > neither (0)."""
    score = 0
    if voice.is_local:
        score += _LOCAL_SCORE
    if voice.normalized_language and voice.normalized_language == normalize_language_tag(primary_language_tag):
        score += _PRIMARY_SCORE
    return score


def _best(voices: Sequence[VoiceDescriptor], primary_language_tag: str) -> VoiceDescriptor:
    # max() keeps the first of equally scored voices.
    return max(voices, key=lambda voice: score_voice(voice, primary_language_tag))


def select_voice(
    voices: Sequence[VoiceDescriptor] | None,
    primary_language_tag: str,
    fallback_language_prefix: str,
) -> VoiceDescriptor | None:
    """Pick the most suitable voice, or ``None`` for an empty inventory."""
    if not voices:
        return None

    primary = normalize_language_tag(primary_language_tag)
    exact = [voice for voice in voices if voice.normalized_language == primary]
    if exact:
        return _best(exact, primary)

    prefix = normalize_language_tag(fallback_language_prefix)
    fallback = [voice for voice in voices if prefix and voice.normalized_language.startswith(prefix)]
    if fallback:
        return _best(fallback, primary)

    return voices[0]


class VoiceResolver:
    """Loads, caches and selects the voice used for announcements.

    Parameters
    ----------
    inventory : callable or None
        Zero-argument accessor returning the engine's current voices.
        ``None`` means the environment has no speech engine.
    primary_language : str
        Preferred language tag (e.g. ``"pt-br"``).
    fallback_language_prefix : str
        Accepted language prefix when no primary voice exists.
    max_retries : int
        Maximum number of inventory queries per load.
    initial_delay : float
        Seconds to wait after the first empty query; doubles each retry.
    max_delay : float
        Cap for the backoff delay in seconds.
    sleep : callable
        Awaitable sleep, replaceable in tests.
    """

    def __init__(
        self,
        inventory: VoiceInventory | None,
        *,
        primary_language: str = "pt-br",
        fallback_language_prefix: str = "pt",
        max_retries: int = 10,
        initial_delay: float = 0.1,
        max_delay: float = 5.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if max_retries < 1:
            raise ValueError(f"max_retries must be >= 1, got {max_retries}")
        self._inventory = inventory
        self._primary_language = primary_language
        self._fallback_language_prefix = fallback_language_prefix
        self._max_retries = max_retries
        self._initial_delay = initial_delay
        self._max_delay = max_delay
        self._sleep = sleep
        self._cache: list[VoiceDescriptor] = []
        self._loading: asyncio.Task[list[VoiceDescriptor]] | None = None
        self._selected: VoiceDescriptor | None = None

    @property
    def voices(self) -> list[VoiceDescriptor]:
        """Cached inventory (empty until a load succeeded)."""
        return list(self._cache)

    @property
    def selected_voice(self) -> VoiceDescriptor | None:
        return self._selected

    @property
    def primary_language(self) -> str:
        return self._primary_language

    @property
    def fallback_language_prefix(self) -> str:
        return self._fallback_language_prefix

    def retry_config(self) -> dict[str, float]:
        return {
            "max_retries": self._max_retries,
            "initial_delay": self._initial_delay,
            "max_delay": self._max_delay,
        }

    async def load_voices(self) -> list[VoiceDescriptor]:
        """Return the voice inventory, retrying while the engine reports none.

        Resolves to an empty list (not an error) when every attempt came
        back empty.

        Raises
        ------
        UnsupportedEnvironmentError
            If no inventory accessor (speech engine) is available.
        """
        if self._cache:
            return list(self._cache)
        if self._inventory is None:
            raise UnsupportedEnvironmentError("Speech synthesis not available in this environment")

        if self._loading is None:
            self._loading = asyncio.ensure_future(self._load_with_retry())
        task = self._loading
        try:
            voices = await asyncio.shield(task)
        finally:
            if self._loading is task and task.done():
                self._loading = None
        if voices:
            self._cache = list(voices)
        return list(voices)

    async def _load_with_retry(self) -> list[VoiceDescriptor]:
        assert self._inventory is not None  # noqa: S101
        delay = self._initial_delay
        for attempt in range(1, self._max_retries + 1):
            voices = list(self._inventory())
            if voices:
                _logger.debug("Voice inventory ready attempt=%d voices=%d", attempt, len(voices))
                return voices
            if attempt == self._max_retries:
                break
            _logger.debug("Voice inventory empty attempt=%d; retrying in %.3fs", attempt, delay)
            await self._sleep(delay)
            delay = min(delay * 2, self._max_delay)

        _logger.warning("No voices available after %d attempts", self._max_retries)
        return []

    def select_voice(
        self,
        voices: Sequence[VoiceDescriptor] | None = None,
        primary_language_tag: str | None = None,
        fallback_language_prefix: str | None = None,
    ) -> VoiceDescriptor | None:
        """Select from *voices* (default: the cache) using the configured languages."""
        return select_voice(
            self._cache if voices is None else voices,
            self._primary_language if primary_language_tag is None else primary_language_tag,
            self._fallback_language_prefix if fallback_language_prefix is None else fallback_language_prefix,
        )

    def score_voice(self, voice: VoiceDescriptor, primary_language_tag: str | None = None) -> int:
        return score_voice(voice, self._primary_language if primary_language_tag is None else primary_language_tag)

    async def resolve(self) -> VoiceDescriptor | None:
        """Load the inventory and remember the selected voice."""
        voices = await self.load_voices()
        self._selected = self.select_voice(voices)
        if self._selected is None:
            _logger.warning("No voice selected; announcements will be skipped")
        else:
            _logger.debug(
                "Selected %s voice: %s (%s)",
                self.voice_info(self._selected),
                self._selected.name,
                self._selected.language_tag,
            )
        return self._selected

    def set_voice(self, voice: VoiceDescriptor | None) -> None:
        """Override the selected voice (``None`` skips announcements)."""
        self._selected = voice

    def voice_info(self, voice: VoiceDescriptor) -> str:
        """Classify *voice* as ``primary``, ``fallback`` or ``default``."""
        lang = voice.normalized_language
        if lang == normalize_language_tag(self._primary_language):
            return "primary"
        prefix = normalize_language_tag(self._fallback_language_prefix)
        if prefix and lang.startswith(prefix):
            return "fallback"
        return "default"

    def clear_cache(self) -> None:
        """Force the next :meth:`load_voices` to query (and retry) again."""
        self._cache = []
