"""Tests for pydantic model parsing with GuiaBaseModel."""

from __future__ import annotations

import math

import pytest
from pydantic import ValidationError

from pyguia.models.address import AddressField, AddressSnapshot
from pyguia.models.position import Position, accuracy_quality
from pyguia.models.speech import QueueItem, SpeechConfig, VoiceDescriptor
from pyguia.state.events import SpeechStatus

# ------------------------------------------------------------------
# Position
# ------------------------------------------------------------------


class TestPosition:
    def test_sensor_record_shape(self) -> None:
        record = {
            "coords": {"latitude": -18.6, "longitude": -43.4, "accuracy": 7.5, "altitude": 1100, "speed": None},
            "timestamp": 1_700_000_000_000,
        }
        position = Position.model_validate(record)
        assert position.latitude == -18.6
        assert position.longitude == -43.4
        assert position.accuracy == 7.5
        assert position.altitude == 1100.0
        assert position.speed is None
        assert position.timestamp == 1_700_000_000_000.0
        assert position.raw == record

    def test_flat_aliases(self) -> None:
        position = Position.model_validate({"lat": "1.5", "lng": 2, "accuracyMeters": 30, "timestamp": "10"})
        assert (position.latitude, position.longitude) == (1.5, 2.0)
        assert position.accuracy == 30.0
        assert position.accuracy_quality == "good"

    def test_blank_and_nan_optional_values_are_dropped(self) -> None:
        position = Position.model_validate(
            {"latitude": 0, "longitude": 0, "timestamp": 0, "accuracy": "", "heading": math.nan}
        )
        assert position.accuracy is None
        assert position.heading is None

    @pytest.mark.parametrize(
        "record",
        [
            {"latitude": 0, "longitude": 0},
            {"latitude": True, "longitude": 0, "timestamp": 0},
            {"latitude": -91, "longitude": 0, "timestamp": 0},
            {"latitude": 0, "longitude": 181, "timestamp": 0},
        ],
    )
    def test_invalid_records(self, record: dict) -> None:
        with pytest.raises(ValidationError):
            Position.model_validate(record)

    def test_frozen(self) -> None:
        position = Position(latitude=0, longitude=0, timestamp=0)
        with pytest.raises(ValidationError):
            position.latitude = 1.0  # type: ignore[misc]

    def test_distance_to(self) -> None:
        a = Position(latitude=0, longitude=0, timestamp=0)
        b = Position(latitude=0, longitude=1, timestamp=0)
        assert a.distance_to(b) == pytest.approx(111_194.93, rel=1e-6)


@pytest.mark.parametrize(
    ("accuracy", "label"),
    [(5, "excellent"), (10, "excellent"), (30, "good"), (99.9, "medium"), (200, "bad"), (201, "very bad"), (None, "very bad")],
)
def test_accuracy_quality(accuracy: float | None, label: str) -> None:
    assert accuracy_quality(accuracy) == label


# ------------------------------------------------------------------
# AddressSnapshot
# ------------------------------------------------------------------


class TestAddressSnapshot:
    def test_portuguese_aliases(self) -> None:
        address = AddressSnapshot.model_validate(
            {"municipio": "Serro", "bairro": "Milho Verde", "logradouro": "Rua Direita", "uf": "MG"}
        )
        assert address.municipality == "Serro"
        assert address.district == "Milho Verde"
        assert address.street == "Rua Direita"
        assert address.state == "MG"
        assert address.raw["uf"] == "MG"

    def test_values_are_stripped_and_blank_is_none(self) -> None:
        address = AddressSnapshot.model_validate({"city": "  Serro ", "suburb": "   ", "road": None})
        assert address.municipality == "Serro"
        assert address.district is None
        assert address.street is None

    def test_get_and_mapping_in_rank_order(self) -> None:
        address = AddressSnapshot(municipality="Serro", street="Rua Direita")
        assert address.get(AddressField.STREET) == "Rua Direita"
        assert address.get("district") is None
        assert list(address.as_mapping().items()) == [
            ("municipality", "Serro"),
            ("district", None),
            ("street", "Rua Direita"),
        ]

    def test_is_empty(self) -> None:
        assert AddressSnapshot().is_empty() is True
        assert AddressSnapshot(state="MG").is_empty() is True
        assert AddressSnapshot(district="Centro").is_empty() is False


# ------------------------------------------------------------------
# Speech models
# ------------------------------------------------------------------


class TestSpeechModels:
    def test_voice_descriptor_aliases(self) -> None:
        voice = VoiceDescriptor.model_validate({"name": "Luciana", "lang": "pt_BR", "localService": True})
        assert voice.language_tag == "pt_BR"
        assert voice.normalized_language == "pt-br"
        assert voice.is_local is True

    def test_voice_descriptor_ignores_extra_fields(self) -> None:
        voice = VoiceDescriptor.model_validate({"name": "X", "voiceURI": "urn:x", "default": True})
        assert voice.language_tag == ""
        assert voice.is_local is False

    def test_queue_item_sort_key_and_expiry(self) -> None:
        item = QueueItem(text="Olá", priority_rank=2, enqueued_at=10.0, sequence=3)
        assert item.sort_key() == (-2, 10.0, 3)
        assert item.is_expired(30.0, 40.0) is False
        assert item.is_expired(30.0, 40.5) is True
        assert str(item) == 'QueueItem("Olá", rank=2)'

    def test_speech_config_bounds(self) -> None:
        assert SpeechConfig() == SpeechConfig(rate=1.0, pitch=1.0)
        with pytest.raises(ValidationError):
            SpeechConfig(rate=11.0)
        with pytest.raises(ValidationError):
            SpeechConfig(pitch=-0.1)

    def test_speech_status_is_speaking(self) -> None:
        status = SpeechStatus(state="paused", queue_size=0, rate=1.0, pitch=1.0)
        assert status.is_speaking is True
        assert SpeechStatus(state="idle", queue_size=0, rate=1.0, pitch=1.0).is_speaking is False
