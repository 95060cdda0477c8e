"""Position snapshot model."""

from __future__ import annotations

import math
from typing import Any

from pydantic import AliasChoices, Field, field_validator, model_validator

from pyguia._constants import ACCURACY_BANDS, ACCURACY_WORST, EARTH_RADIUS_METERS
from pyguia._normalize import safe_float
from pyguia.models._base import GuiaBaseModel


def accuracy_quality(accuracy: float | None) -> str:
    """Classify a horizontal accuracy (meters) into a named band."""
    if accuracy is None:
        return ACCURACY_WORST
    for upper, label in ACCURACY_BANDS:
        if accuracy <= upper:
            return label
    return ACCURACY_WORST


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in meters between two points given in degrees."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)
    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_METERS * c


class Position(GuiaBaseModel):
    """Immutable position fix.

    Accepts both flat dicts and the sensor record shape
    ``{"coords": {...}, "timestamp": ...}``.

    Parameters
    ----------
    latitude : float
        Latitude in degrees.
    longitude : float
        Longitude in degrees.
    accuracy : float or None
        Horizontal accuracy radius in meters.
    timestamp : float
        Fix time in epoch milliseconds.
    altitude, heading, speed : float or None
        Optional sensor readings.
    raw : dict
        Original sensor record.
    """

    latitude: float = Field(validation_alias=AliasChoices("latitude", "lat"))
    longitude: float = Field(validation_alias=AliasChoices("longitude", "lon", "lng"))
    accuracy: float | None = Field(default=None, validation_alias=AliasChoices("accuracy", "accuracyMeters", "accuracy_meters"))
    timestamp: float
    altitude: float | None = None
    heading: float | None = None
    speed: float | None = None

    @model_validator(mode="before")
    @classmethod
    def _merge_coords(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        coords = values.get("coords")
        if not isinstance(coords, dict):
            return values
        merged = {k: v for k, v in values.items() if k != "coords"}
        merged.update(coords)
        merged.setdefault("raw", values)
        return merged

    @field_validator("latitude", "longitude", "timestamp", mode="before")
    @classmethod
    def _require_float(cls, value: Any) -> float:
        parsed = safe_float(value)
        if parsed is None:
            raise ValueError(f"expected a number, got {value!r}")
        return parsed

    @field_validator("accuracy", "altitude", "heading", "speed", mode="before")
    @classmethod
    def _coerce_floats(cls, value: Any) -> float | None:
        return safe_float(value)

    @field_validator("latitude")
    @classmethod
    def _check_latitude(cls, value: float) -> float:
        if not -90.0 <= value <= 90.0:
            raise ValueError(f"latitude out of range: {value}")
        return value

    @field_validator("longitude")
    @classmethod
    def _check_longitude(cls, value: float) -> float:
        if not -180.0 <= value <= 180.0:
            raise ValueError(f"longitude out of range: {value}")
        return value

    @property
    def accuracy_quality(self) -> str:
        return accuracy_quality(self.accuracy)

    def distance_to(self, other: Position) -> float:
        """Haversine distance to *other* in meters."""
        return haversine_distance(self.latitude, self.longitude, other.latitude, other.longitude)
