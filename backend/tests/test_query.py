from healthcarer.schemas.slots import Slot
from healthcarer.services.slots import book, query
from healthcarer.services.slots.query import plan


def test_plan_picks_access_pattern() -> None:
    assert plan("Carer1", "20250725") == "partition_prefix"
    assert plan("Carer1", None) == "partition"
    assert plan(None, "20250725") == "scan"
    assert plan(None, None) == "scan"


def test_carer_and_date(seeded_service) -> None:
    slots = query(seeded_service.store, carer_id="Carer1", date="20250725")

    assert [s.date_time_slot for s in slots] == ["20250725#0900", "20250725#0930"]
    assert all(s.carer_id == "Carer1" for s in slots)


def test_carer_only(seeded_service) -> None:
    slots = query(seeded_service.store, carer_id="Carer1")

    assert len(slots) == 4
    assert {s.date for s in slots} == {"20250725", "20250726"}


def test_no_filters_returns_catalogue(seeded_service) -> None:
    slots = query(seeded_service.store)

    assert len(slots) == 8
    assert [s.key for s in slots] == sorted(s.key for s in slots)


def test_date_only_filters_scan(seeded_service) -> None:
    slots = query(seeded_service.store, date="20250726")

    assert len(slots) == 4
    assert {s.carer_id for s in slots} == {"Carer1", "Carer2"}


def test_unknown_carer_is_empty(seeded_service) -> None:
    assert query(seeded_service.store, carer_id="Nobody") == []
    assert query(seeded_service.store, carer_id="Nobody", date="20250725") == []


def test_limit_returns_first_slots_in_key_order(store) -> None:
    # inserted out of order
    for time_slot in ("1000", "0930", "0900"):
        store.put_if_absent(Slot.free("Carer1", "20250725", time_slot))

    slots = query(store, limit=2)

    assert [s.time_slot for s in slots] == ["0900", "0930"]


def test_limit_spans_partitions_in_order(seeded_service) -> None:
    slots = query(seeded_service.store, limit=5)

    assert [s.key for s in slots] == [
        ("Carer1", "20250725#0900"),
        ("Carer1", "20250725#0930"),
        ("Carer1", "20250726#0900"),
        ("Carer1", "20250726#0930"),
        ("Carer2", "20250725#0900"),
    ]


def test_query_reflects_bookings(seeded_service) -> None:
    book(seeded_service.store, "Carer2", "20250725", "0930", "Alice")

    slots = query(seeded_service.store, carer_id="Carer2", date="20250725")

    booked = [s for s in slots if s.booking_person_name]
    assert len(booked) == 1
    assert booked[0].time_slot == "0930"
