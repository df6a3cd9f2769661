# backend/healthcarer/services/slots/catalogue.py
"""
Slot catalogue: the closed set of carers × dates × time slots.

generate_time_slots() → "HHMM" strings, one per interval step in
[start_hour, end_hour]. 9..15 every 30 min gives 0900 … 1530 (14 slots).

initialize_catalogue() seeds the store with a Free slot per triple.
Seeding writes are put-if-absent, so re-running never touches a
slot that already exists (Booked slots stay Booked).
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from itertools import product
from typing import Iterable, Iterator

from ...config import CatalogueConfig, get_catalogue_config
from ...errors import StoreConnectivityError
from ...schemas.slots import InitializeResult, Slot
from .store import PutResult, SlotStore

logger = logging.getLogger(__name__)


class TimeSlots:
    """Finite, restartable sequence of "HHMM" strings."""

    def __init__(self, start_hour: int, end_hour: int, interval_minutes: int):
        self.start_hour = start_hour
        self.end_hour = end_hour
        self.interval_minutes = interval_minutes

    def __iter__(self) -> Iterator[str]:
        for hour in range(self.start_hour, self.end_hour + 1):
            for minute in range(0, 60, self.interval_minutes):
                yield f"{hour:02d}{minute:02d}"

    def __len__(self) -> int:
        per_hour = len(range(0, 60, self.interval_minutes))
        return (self.end_hour - self.start_hour + 1) * per_hour


def generate_time_slots(
    start_hour: int = 9,
    end_hour: int = 15,
    interval_minutes: int = 30,
) -> TimeSlots:
    if interval_minutes <= 0:
        raise ValueError(f"interval_minutes must be positive, got {interval_minutes}")
    return TimeSlots(start_hour, end_hour, interval_minutes)


def generate(
    carers: Iterable[str],
    dates: Iterable[str],
    start_hour: int = 9,
    end_hour: int = 15,
    interval_minutes: int = 30,
) -> Iterator[tuple[str, str, str]]:
    """Yield every (carer, date, time_slot) triple of the catalogue."""
    time_slots = generate_time_slots(start_hour, end_hour, interval_minutes)
    # sorted: sets have no stable order
    return product(sorted(set(carers)), sorted(set(dates)), time_slots)


def catalogue_triples(config: CatalogueConfig) -> Iterator[tuple[str, str, str]]:
    return generate(
        config.carers,
        config.dates,
        config.start_hour,
        config.end_hour,
        config.interval_minutes,
    )


def initialize_catalogue(
    store: SlotStore,
    config: CatalogueConfig | None = None,
    max_workers: int = 16,
) -> InitializeResult:
    """
    Seed the store with a Free slot for every catalogue triple.

    Writes run concurrently and all of them run to completion.
    ALREADY_EXISTS counts as done. Store errors are collected and
    reported once at the end as a single StoreConnectivityError.
    """
    config = config or get_catalogue_config()
    slots = [
        Slot.free(carer_id, date, time_slot)
        for carer_id, date, time_slot in catalogue_triples(config)
    ]

    result = InitializeResult()
    failed: list[tuple[str, str]] = []

    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        futures = {pool.submit(store.put_if_absent, slot): slot for slot in slots}
        for future in as_completed(futures):
            slot = futures[future]
            try:
                outcome = future.result()
            except StoreConnectivityError as e:
                logger.warning(f"Seeding {slot.carer_id}/{slot.date_time_slot} failed: {e}")
                failed.append(slot.key)
                continue

            if outcome == PutResult.CREATED:
                result.created += 1
            else:
                result.existing += 1

    logger.info(
        f"Catalogue initialized: {result.created} created, "
        f"{result.existing} already existed, {len(failed)} failed"
    )

    if failed:
        raise StoreConnectivityError(
            f"Failed to seed {len(failed)} of {len(slots)} time slots"
        )

    return result
