"""Address snapshot model."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import AliasChoices, Field, field_validator

from pyguia._normalize import safe_str
from pyguia.models._base import GuiaBaseModel


class AddressField(StrEnum):
    """Address fields tracked for change, highest administrative level first."""

    MUNICIPALITY = "municipality"
    DISTRICT = "district"
    STREET = "street"


class AddressSnapshot(GuiaBaseModel):
    """Immutable address as resolved for one accepted position.

    Portuguese keys produced by Brazilian geocoders (``municipio``,
    ``bairro``, ``logradouro``, ``uf``) are accepted as aliases.
    """

    municipality: str | None = Field(
        default=None,
        validation_alias=AliasChoices("municipality", "municipio", "city", "town"),
    )
    district: str | None = Field(
        default=None,
        validation_alias=AliasChoices("district", "bairro", "suburb", "neighbourhood"),
    )
    street: str | None = Field(
        default=None,
        validation_alias=AliasChoices("street", "logradouro", "road"),
    )
    state: str | None = Field(default=None, validation_alias=AliasChoices("state", "uf", "estado"))

    @field_validator("municipality", "district", "street", "state", mode="before")
    @classmethod
    def _coerce_str(cls, value: Any) -> str | None:
        return safe_str(value)

    def get(self, field: AddressField | str) -> str | None:
        """Return the value of a tracked field (``None`` when unknown)."""
        return getattr(self, AddressField(field).value)

    def as_mapping(self) -> dict[str, str | None]:
        """Tracked fields in rank order."""
        return {member.value: self.get(member) for member in AddressField}

    def is_empty(self) -> bool:
        return all(value is None for value in self.as_mapping().values())
