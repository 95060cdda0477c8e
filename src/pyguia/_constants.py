"""Internal constants shared across the library."""

#: Mean Earth radius used by the haversine distance, in meters.
EARTH_RADIUS_METERS = 6_371_000.0

# ------------------------------------------------------------------
# Speech parameter ranges
# ------------------------------------------------------------------

MIN_RATE = 0.1
MAX_RATE = 10.0
DEFAULT_RATE = 1.0

MIN_PITCH = 0.0
MAX_PITCH = 2.0
DEFAULT_PITCH = 1.0

# ------------------------------------------------------------------
# Accuracy bands (meters, inclusive upper bound)
# ------------------------------------------------------------------

ACCURACY_BANDS: tuple[tuple[float, str], ...] = (
    (10.0, "excellent"),
    (30.0, "good"),
    (100.0, "medium"),
    (200.0, "bad"),
)
ACCURACY_WORST = "very bad"


def clamp(value: float, lower: float, upper: float) -> float:
    """Clamp *value* into ``[lower, upper]``."""
    return max(lower, min(upper, value))
