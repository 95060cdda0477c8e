"""Normalization helpers.

Lenient parsing of sensor and geocoder payloads.
"""

from __future__ import annotations

import math
from typing import Any


def safe_float(value: Any) -> float | None:
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(result):
        return None
    return result


def safe_str(value: Any) -> str | None:
    """Return a stripped string, or ``None`` for empty/absent values."""
    if value is None:
        return None
    text = str(value).strip()
    return text if text else None


def is_real_number(value: Any) -> bool:
    """Return True for ints and floats that are not NaN (bools excluded)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not (isinstance(value, float) and math.isnan(value))


def normalize_language_tag(tag: Any) -> str:
    """Lower-case a BCP-47-ish tag, treating ``_`` as ``-`` (``pt_BR`` -> ``pt-br``)."""
    if not isinstance(tag, str):
        return ""
    return tag.strip().replace("_", "-").lower()
