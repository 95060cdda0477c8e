"""Pipeline configuration for pyguia."""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Mapping
from typing import Any

from pyguia.exceptions import GuiaConfigError


def _env_float(env: Mapping[str, str], key: str) -> float | None:
    value = env.get(key)
    if value is None:
        return None
    try:
        return float(value)
    except ValueError as err:
        raise GuiaConfigError(f"{key} must be numeric, got {value!r}") from err


def _env_tuple(value: str | None) -> tuple[str, ...] | None:
    if value is None:
        return None
    return tuple(part.strip().lower() for part in value.split(",") if part.strip())


@dataclasses.dataclass(frozen=True)
class GuiaConfig:
    """Pipeline configuration.

    Parameters
    ----------
    tracking_interval_ms : float
        Elapsed time (milliseconds) after which a new fix is accepted
        regardless of distance.  Also separates ``updated`` from
        ``immediate_address_update`` position events.
    minimum_distance_change : float
        Distance (meters) after which a new fix is accepted regardless
        of elapsed time.
    not_accepted_accuracy : tuple of str
        Accuracy bands (``"excellent"``, ``"good"``, ``"medium"``,
        ``"bad"``, ``"very bad"``) whose fixes are rejected outright.
        Empty by default.
    queue_timer_interval : float
        Seconds between speech queue drain ticks.
    full_address_interval : float
        Seconds between periodic full-address announcements.
        Set to ``0`` to disable them.
    queue_max_size : int
        Maximum number of pending announcements.
    queue_item_ttl : float or None
        Seconds a pending announcement stays valid.  ``None`` disables
        expiry.
    voice_max_retries : int
        Maximum number of voice inventory queries per load.
    voice_initial_delay : float
        First backoff delay (seconds) between empty inventory queries.
    voice_max_delay : float
        Upper bound for the doubling backoff delay (seconds).
    primary_language : str
        Preferred voice language tag.
    fallback_language_prefix : str
        Language prefix accepted when no primary voice exists.
    """

    tracking_interval_ms: float = 50_000.0
    minimum_distance_change: float = 20.0
    not_accepted_accuracy: tuple[str, ...] = ()
    queue_timer_interval: float = 5.0
    full_address_interval: float = 50.0
    queue_max_size: int = 100
    queue_item_ttl: float | None = 30.0
    voice_max_retries: int = 10
    voice_initial_delay: float = 0.1
    voice_max_delay: float = 5.0
    primary_language: str = "pt-br"
    fallback_language_prefix: str = "pt"

    def __post_init__(self) -> None:
        if self.tracking_interval_ms < 0:
            raise GuiaConfigError("tracking_interval_ms must be >= 0")
        if self.minimum_distance_change < 0:
            raise GuiaConfigError("minimum_distance_change must be >= 0")
        if self.queue_timer_interval <= 0:
            raise GuiaConfigError("queue_timer_interval must be > 0")
        if self.full_address_interval < 0:
            raise GuiaConfigError("full_address_interval must be >= 0")
        if self.queue_max_size < 1:
            raise GuiaConfigError("queue_max_size must be >= 1")
        if self.queue_item_ttl is not None and self.queue_item_ttl <= 0:
            raise GuiaConfigError("queue_item_ttl must be > 0 or None")
        if self.voice_max_retries < 1:
            raise GuiaConfigError("voice_max_retries must be >= 1")
        if self.voice_initial_delay < 0 or self.voice_max_delay < 0:
            raise GuiaConfigError("voice retry delays must be >= 0")

    @classmethod
    def from_env(cls, **overrides: Any) -> GuiaConfig:
        """Create configuration from environment variables.

        Reads optional ``GUIA_*`` variables.  Explicit keyword arguments
        override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        GuiaConfig
            Populated configuration.
        """
        env = os.environ

        _ENV_FLOAT_MAP = {
            "GUIA_TRACKING_INTERVAL_MS": "tracking_interval_ms",
            "GUIA_MINIMUM_DISTANCE_CHANGE": "minimum_distance_change",
            "GUIA_QUEUE_TIMER_INTERVAL": "queue_timer_interval",
            "GUIA_FULL_ADDRESS_INTERVAL": "full_address_interval",
            "GUIA_VOICE_INITIAL_DELAY": "voice_initial_delay",
            "GUIA_VOICE_MAX_DELAY": "voice_max_delay",
        }
        _ENV_INT_MAP = {
            "GUIA_QUEUE_MAX_SIZE": "queue_max_size",
            "GUIA_VOICE_MAX_RETRIES": "voice_max_retries",
        }
        _ENV_STR_MAP = {
            "GUIA_PRIMARY_LANGUAGE": "primary_language",
            "GUIA_FALLBACK_LANGUAGE_PREFIX": "fallback_language_prefix",
        }

        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_FLOAT_MAP.items():
            parsed = _env_float(env, env_key)
            if parsed is not None:
                config_kwargs[field_name] = parsed
        for env_key, field_name in _ENV_INT_MAP.items():
            parsed = _env_float(env, env_key)
            if parsed is not None:
                config_kwargs[field_name] = int(parsed)
        for env_key, field_name in _ENV_STR_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val.strip()

        # A TTL of 0 in the environment means "never expire".
        ttl = _env_float(env, "GUIA_QUEUE_ITEM_TTL")
        if ttl is not None:
            config_kwargs["queue_item_ttl"] = ttl if ttl > 0 else None

        accuracy = _env_tuple(env.get("GUIA_NOT_ACCEPTED_ACCURACY"))
        if accuracy is not None:
            config_kwargs["not_accepted_accuracy"] = accuracy

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
