"""Custom exception hierarchy for pyguia."""

from __future__ import annotations

from typing import Any


class GuiaError(Exception):
    """Base exception for all pyguia errors."""


class GuiaConfigError(GuiaError):
    """Invalid or missing configuration."""


class InvalidArgumentError(GuiaError, TypeError):
    """Argument rejected before any state was touched.

    Raised for non-callable observers, non-numeric or NaN speech
    parameters, and malformed queue entries.  Subclasses
    :class:`TypeError` so callers written against plain type checks
    keep working.
    """

    def __init__(self, message: str, *, argument: str = "") -> None:
        self.argument = argument
        super().__init__(message)


class UnsupportedEnvironmentError(GuiaError):
    """The host environment lacks a speech engine (or its voice inventory)."""


class ObserverFailure(GuiaError):
    """An observer raised while being notified.

    Never propagated out of :meth:`pyguia.bus.NotificationBus.notify`;
    it only exists so the failure can be logged with its context.
    """

    def __init__(self, observer: Any, error: BaseException) -> None:
        self.observer = observer
        self.error = error
        name = getattr(observer, "__qualname__", None) or repr(observer)
        super().__init__(f"Observer {name} failed: {error!r}")
