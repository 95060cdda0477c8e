"""Position acceptance policy.

This module intentionally contains *no* state.  Callers own the last
accepted fix and pass it in; the decision is a pure function of two
snapshots and two thresholds.
"""

from __future__ import annotations

from dataclasses import dataclass

from pyguia.models.position import Position, haversine_distance


@dataclass(frozen=True, slots=True)
class ArbiterDecision:
    """Result of :func:`evaluate`.

    ``distance_meters`` and ``elapsed_ms`` are ``None`` for a first fix.
    """

    accept: bool
    distance_meters: float | None = None
    elapsed_ms: float | None = None
    first_fix: bool = False
    time_threshold_met: bool = False


def evaluate(
    candidate: Position,
    last_accepted: Position | None,
    time_threshold_ms: float,
    distance_threshold_meters: float,
) -> ArbiterDecision:
    """Decide whether *candidate* is significant relative to *last_accepted*.

    Policy:
    - No previous fix: accept.
    - Otherwise accept if enough time elapsed **or** the observer moved far enough.
    """
    if last_accepted is None:
        return ArbiterDecision(accept=True, first_fix=True)

    distance = haversine_distance(
        last_accepted.latitude,
        last_accepted.longitude,
        candidate.latitude,
        candidate.longitude,
    )
    elapsed = candidate.timestamp - last_accepted.timestamp
    time_met = elapsed >= time_threshold_ms
    accept = time_met or distance >= distance_threshold_meters
    return ArbiterDecision(accept=accept, distance_meters=distance, elapsed_ms=elapsed, time_threshold_met=time_met)
