"""Announcement texts (Brazilian Portuguese).

Each builder returns the text and the rank it is queued with, so ranks
are decided in one place.
"""

from __future__ import annotations

from pyguia.models.address import AddressField, AddressSnapshot
from pyguia.models.speech import PriorityRank
from pyguia.state.events import ChangeDetails

FIELD_RANKS: dict[AddressField, PriorityRank] = {
    AddressField.MUNICIPALITY: PriorityRank.MUNICIPALITY,
    AddressField.DISTRICT: PriorityRank.DISTRICT,
    AddressField.STREET: PriorityRank.STREET,
}


def build_municipality_announcement(current: str | None, previous: str | None = None) -> str:
    if not current:
        return "Novo município detectado"
    if previous:
        return f"Você saiu de {previous} e entrou em {current}"
    return f"Você entrou no município de {current}"


def build_district_announcement(current: str | None) -> str:
    if not current:
        return "Novo bairro detectado"
    return f"Você entrou no bairro {current}"


def build_street_announcement(current: str | None) -> str:
    if not current:
        return "Nova localização detectada"
    return f"Você está agora em {current}"


def build_change_announcement(details: ChangeDetails) -> tuple[str, PriorityRank]:
    """Text and rank for a detected field transition."""
    if details.field == AddressField.MUNICIPALITY:
        text = build_municipality_announcement(details.to_value, details.from_value)
    elif details.field == AddressField.DISTRICT:
        text = build_district_announcement(details.to_value)
    else:
        text = build_street_announcement(details.to_value)
    return text, FIELD_RANKS[details.field]


def build_full_address_announcement(address: AddressSnapshot | None) -> tuple[str, PriorityRank]:
    """Periodic reminder of the whole address, always at the lowest rank."""
    rank = PriorityRank.PERIODIC
    if address is None:
        return "Localização não disponível", rank

    street, district, municipality = address.street, address.district, address.municipality
    if street:
        parts = [street]
        if district:
            parts.append(district)
        if municipality:
            parts.append(municipality)
        return f"Você está em {', '.join(parts)}", rank
    if district:
        text = f"Você está em bairro {district}"
        if municipality:
            text += f", {municipality}"
        return text, rank
    if municipality:
        return f"Você está em {municipality}", rank
    return "Localização detectada, mas endereço não disponível", rank
