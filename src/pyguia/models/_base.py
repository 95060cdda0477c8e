"""Base model for pyguia payloads.

Every model fed by an external collaborator (location sensor, address
resolver, speech engine) inherits from :class:`GuiaBaseModel` which
provides:

* ``frozen=True`` so snapshots can be handed to observers as-is.
* A ``model_validator(mode="before")`` that drops blank strings and
  NaN so the field default is used.
* A ``raw`` dict that captures the original payload.
"""

from __future__ import annotations

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class GuiaBaseModel(BaseModel):
    """Base for collaborator-supplied snapshots."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    raw: dict[str, Any] = Field(default_factory=dict, repr=False)
    """Original payload."""

    @staticmethod
    def _clean_dict(values: dict[str, Any]) -> dict[str, Any]:
        cleaned: dict[str, Any] = {}
        for key, value in values.items():
            if value is None:
                continue
            if isinstance(value, str) and not value.strip():
                continue
            if isinstance(value, float) and math.isnan(value):
                continue
            cleaned[key] = value
        return cleaned

    @model_validator(mode="before")
    @classmethod
    def _clean_values(cls, values: Any) -> Any:
        """Strip blank values and stash the raw payload."""
        if not isinstance(values, dict):
            return values
        cleaned = GuiaBaseModel._clean_dict(values)
        # Keep a caller-supplied raw= as-is.
        if "raw" not in values:
            cleaned["raw"] = dict(values)
        return cleaned
