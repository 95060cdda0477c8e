from __future__ import annotations

import logging

import pytest

from pyguia.config import GuiaConfig
from pyguia.models.address import AddressSnapshot
from pyguia.state.events import PositionEvent, PositionEventKind, RejectionReason
from pyguia.state.store import LocationStore


def _record(lat: float, lon: float, ts: float, accuracy: float = 5.0) -> dict:
    return {"coords": {"latitude": lat, "longitude": lon, "accuracy": accuracy}, "timestamp": ts}


def _store(**overrides: object) -> tuple[LocationStore, list[PositionEvent]]:
    store = LocationStore(GuiaConfig(**overrides))  # type: ignore[arg-type]
    events: list[PositionEvent] = []
    store.positions.subscribe(events.append)
    return store, events


class TestUpdatePosition:
    def test_first_fix_is_updated(self) -> None:
        store, events = _store()

        event = store.update_position(_record(-23.5505, -46.6333, 1_000.0))

        assert event is not None
        assert event.kind == PositionEventKind.UPDATED
        assert event.accepted is True
        assert store.position is not None
        assert store.position.latitude == -23.5505
        assert events == [event]

    def test_insignificant_fix_is_not_updated(self) -> None:
        store, events = _store()
        store.update_position(_record(0.0, 0.0, 0.0))

        event = store.update_position(_record(0.0001, 0.0, 5_000.0))

        assert event is not None
        assert event.kind == PositionEventKind.NOT_UPDATED
        assert event.reason == RejectionReason.DISTANCE_AND_TIME
        assert event.position is not None
        assert event.position.timestamp == 0.0
        assert store.position.timestamp == 0.0  # type: ignore[union-attr]
        assert len(events) == 2

    def test_distance_only_acceptance_is_immediate_address_update(self) -> None:
        store, _ = _store()
        store.update_position(_record(0.0, 0.0, 0.0))

        event = store.update_position(_record(0.001, 0.0, 5_000.0))

        assert event is not None
        assert event.kind == PositionEventKind.IMMEDIATE_ADDRESS_UPDATE
        assert event.distance_meters == pytest.approx(111.19, abs=0.01)

    def test_elapsed_time_acceptance_is_updated(self) -> None:
        store, _ = _store(tracking_interval_ms=10_000.0)
        store.update_position(_record(0.0, 0.0, 0.0))

        event = store.update_position(_record(0.0, 0.0, 10_000.0))

        assert event is not None
        assert event.kind == PositionEventKind.UPDATED
        assert event.elapsed_ms == 10_000.0

    def test_accuracy_filter_rejects_configured_bands(self) -> None:
        store, events = _store(not_accepted_accuracy=("bad", "very bad"))

        event = store.update_position(_record(0.0, 0.0, 0.0, accuracy=150.0))

        assert event is not None
        assert event.kind == PositionEventKind.NOT_UPDATED
        assert event.reason == RejectionReason.ACCURACY
        assert store.position is None
        assert events == [event]

    def test_accuracy_filter_is_empty_by_default(self) -> None:
        store, _ = _store()
        event = store.update_position(_record(0.0, 0.0, 0.0, accuracy=5_000.0))
        assert event is not None
        assert event.kind == PositionEventKind.UPDATED

    @pytest.mark.parametrize(
        "record",
        [
            {"coords": {"latitude": 1.0, "longitude": 2.0}},
            {"coords": {"latitude": "north", "longitude": 2.0}, "timestamp": 1.0},
            {"timestamp": 1.0},
            {"coords": {"latitude": 91.0, "longitude": 2.0}, "timestamp": 1.0},
            None,
        ],
    )
    def test_invalid_record_is_ignored(self, record: object, caplog: pytest.LogCaptureFixture) -> None:
        store, events = _store()
        with caplog.at_level(logging.WARNING, logger="pyguia.state.store"):
            assert store.update_position(record) is None  # type: ignore[arg-type]
        assert events == []
        assert store.position is None
        assert "Ignoring invalid position record" in caplog.text

    def test_clear_position_does_not_notify(self) -> None:
        store, events = _store()
        store.update_position(_record(0.0, 0.0, 0.0))
        store.clear_position()

        assert store.position is None
        assert len(events) == 1

        event = store.update_position(_record(0.0, 0.0, 1.0))
        assert event is not None
        assert event.kind == PositionEventKind.UPDATED


class TestAddress:
    def test_update_address_shifts_previous(self) -> None:
        store = LocationStore()
        first = AddressSnapshot(municipality="São Paulo")
        second = AddressSnapshot(municipality="Rio de Janeiro")

        assert store.update_address(first) == (first, None)
        assert store.update_address(second) == (second, first)
        assert store.current_address == second
        assert store.previous_address == first

    def test_clear_address(self) -> None:
        store = LocationStore()
        store.update_address(AddressSnapshot(municipality="São Paulo"))
        store.clear_address()
        assert store.current_address is None
        assert store.previous_address is None
