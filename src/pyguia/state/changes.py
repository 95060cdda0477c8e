"""Per-field address change deduplication."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pyguia.models.address import AddressField, AddressSnapshot
from pyguia.state.events import ChangeDetails

AddressLike = AddressSnapshot | Mapping[str, Any]


def _as_snapshot(address: AddressLike | None) -> AddressSnapshot | None:
    if address is None or isinstance(address, AddressSnapshot):
        return address
    return AddressSnapshot.model_validate(dict(address))


def _field_value(address: AddressLike | None, field: AddressField) -> str | None:
    # Mappings are read through the model aliases.
    snapshot = _as_snapshot(address)
    return None if snapshot is None else snapshot.get(field)


def _signature_part(value: Any) -> str:
    return "null" if value is None else str(value)


def build_signature(field: AddressField | str, current: AddressLike, previous: AddressLike) -> str:
    """Deterministic ``"<previous>=><current>"`` encoding of a field transition."""
    member = AddressField(field)
    return f"{_signature_part(_field_value(previous, member))}=>{_signature_part(_field_value(current, member))}"


class ChangeDetector:
    """Remembers the last announced transition of every tracked field.

    A transition fires once; presenting the same ``previous => current``
    pair again is suppressed until its signature is cleared.
    """

    def __init__(self) -> None:
        self._signatures: dict[AddressField, str] = {}

    def has_field_changed(
        self,
        field: AddressField | str,
        current: AddressLike | None,
        previous: AddressLike | None,
    ) -> bool:
        """Return True exactly once per new transition of *field*."""
        if current is None or previous is None:
            return False

        member = AddressField(field)
        # Equal values are not a transition; leave signatures untouched.
        if _field_value(current, member) == _field_value(previous, member):
            return False

        signature = build_signature(member, current, previous)
        if self._signatures.get(member) == signature:
            return False

        self._signatures[member] = signature
        return True

    def get_change_details(
        self,
        field: AddressField | str,
        current: AddressLike | None,
        previous: AddressLike | None,
        current_raw: dict[str, Any] | None = None,
        previous_raw: dict[str, Any] | None = None,
    ) -> ChangeDetails:
        """Describe the transition of *field*; independent of dedup state."""
        member = AddressField(field)
        return ChangeDetails(
            field=member,
            from_value=_field_value(previous, member),
            to_value=_field_value(current, member),
            previous_address=_as_snapshot(previous),
            current_address=_as_snapshot(current),
            current_raw_data=current_raw,
            previous_raw_data=previous_raw,
        )

    def clear_field_signature(self, field: AddressField | str) -> bool:
        """Forget *field*'s last transition.  Returns True if one was stored."""
        return self._signatures.pop(AddressField(field), None) is not None

    def clear_all_signatures(self) -> None:
        self._signatures.clear()

    def get_field_signature(self, field: AddressField | str) -> str | None:
        return self._signatures.get(AddressField(field))

    def has_field_signature(self, field: AddressField | str) -> bool:
        return AddressField(field) in self._signatures

    @property
    def tracked_fields(self) -> list[AddressField]:
        return list(self._signatures)
