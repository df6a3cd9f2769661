import pytest

from healthcarer.config import CatalogueConfig
from healthcarer.errors import StoreConnectivityError
from healthcarer.schemas.slots import Availability
from healthcarer.services.slots import (
    book,
    generate,
    generate_time_slots,
    initialize_catalogue,
)


def test_time_slots_nine_to_fifteen_every_half_hour() -> None:
    slots = list(generate_time_slots(9, 15, 30))

    assert len(slots) == 14
    assert slots[0] == "0900"
    assert slots[-1] == "1530"
    assert slots == sorted(set(slots))


def test_time_slots_are_restartable() -> None:
    slots = generate_time_slots(9, 10, 30)

    assert list(slots) == ["0900", "0930", "1000", "1030"]
    assert list(slots) == list(slots)
    assert len(slots) == 4


def test_time_slots_quarter_hour_padding() -> None:
    assert list(generate_time_slots(0, 0, 15)) == ["0000", "0015", "0030", "0045"]


def test_generate_covers_every_triple() -> None:
    triples = list(generate({"Carer1", "Carer2", "Carer3"}, {"20250728", "20250729", "20250730"}))

    assert len(triples) == 126
    assert len(set(triples)) == 126
    assert ("Carer1", "20250728", "0900") in triples
    assert ("Carer3", "20250730", "1530") in triples


def test_reference_catalogue_size() -> None:
    config = CatalogueConfig()
    assert config.slots_per_day == 14
    assert config.total_slots == 126


@pytest.mark.parametrize(
    "kwargs",
    [
        {"interval_minutes": 7},
        {"interval_minutes": 0},
        {"start_hour": 16, "end_hour": 15},
        {"end_hour": 24},
        {"carers": ()},
        {"dates": ()},
        {"dates": ("2025-07-28",)},
        {"dates": ("20251340",)},
        {"carers": ("Bad#Carer",)},
    ],
)
def test_catalogue_config_rejects_invalid_dimensions(kwargs) -> None:
    with pytest.raises(ValueError):
        CatalogueConfig(**kwargs)


def test_initialize_creates_free_slots(store, small_catalogue) -> None:
    result = initialize_catalogue(store, small_catalogue, max_workers=4)

    assert result.created == 8
    assert result.existing == 0
    assert len(store) == 8
    slot = store.get("Carer1", "20250725#0930")
    assert slot.availability == Availability.FREE
    assert slot.booking_person_name is None


def test_initialize_twice_is_idempotent(store, small_catalogue) -> None:
    initialize_catalogue(store, small_catalogue)
    before = sorted(store.scan_all(), key=lambda s: s.key)

    result = initialize_catalogue(store, small_catalogue)

    assert result.created == 0
    assert result.existing == 8
    assert sorted(store.scan_all(), key=lambda s: s.key) == before


def test_initialize_never_overwrites_booked_slot(store, small_catalogue) -> None:
    initialize_catalogue(store, small_catalogue)
    book(store, "Carer2", "20250726", "0900", "Alice")

    initialize_catalogue(store, small_catalogue)

    slot = store.get("Carer2", "20250726#0900")
    assert slot.availability == Availability.BOOKED
    assert slot.booking_person_name == "Alice"


def test_initialize_partial_failure_seeds_the_rest(small_catalogue, flaky_store_cls) -> None:
    store = flaky_store_cls(failing_keys={("Carer1", "20250725#0900")})

    with pytest.raises(StoreConnectivityError, match="1 of 8"):
        initialize_catalogue(store, small_catalogue, max_workers=4)

    assert len(store) == 7
    assert store.get("Carer1", "20250725#0900") is None
    assert store.get("Carer2", "20250726#0930") is not None


def test_initialize_retry_after_partial_failure(small_catalogue, flaky_store_cls) -> None:
    store = flaky_store_cls(failing_keys={("Carer2", "20250725#0930")})
    with pytest.raises(StoreConnectivityError):
        initialize_catalogue(store, small_catalogue)

    store.failing_keys.clear()
    result = initialize_catalogue(store, small_catalogue)

    assert result.created == 1
    assert result.existing == 7
