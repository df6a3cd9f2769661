# backend/healthcarer/services/slots/store.py
"""
Slot Store capability interface.

Everything the core needs from the key-value store:

    put_if_absent(slot)                           → CREATED | ALREADY_EXISTS
    compare_and_set(carer, dts, expected, slot)   → OK | PRECONDITION_FAILED
    get(carer, dts)                               → Slot | None
    get_by_partition(carer)                       → slots of one carer
    get_by_partition_and_prefix(carer, prefix)    → slots whose sort key starts with prefix
    scan_all()                                    → every slot

Key layout: partition key = carer_id, sort key = date_time_slot ("YYYYMMDD#HHMM").

Precondition failures are return values. Anything else that goes wrong
inside the store is raised as StoreConnectivityError.
"""

import threading
from enum import Enum
from typing import Iterator, Optional, Protocol

from ...schemas.slots import Availability, Slot


class PutResult(str, Enum):
    CREATED = "created"
    ALREADY_EXISTS = "already_exists"


class CasResult(str, Enum):
    OK = "ok"
    PRECONDITION_FAILED = "precondition_failed"


class SlotStore(Protocol):

    def put_if_absent(self, slot: Slot) -> PutResult: ...

    def compare_and_set(
        self,
        carer_id: str,
        date_time_slot: str,
        expected: Availability,
        new_slot: Slot,
    ) -> CasResult: ...

    def get(self, carer_id: str, date_time_slot: str) -> Optional[Slot]: ...

    def get_by_partition(self, carer_id: str) -> list[Slot]: ...

    def get_by_partition_and_prefix(self, carer_id: str, prefix: str) -> list[Slot]: ...

    def scan_all(self) -> Iterator[Slot]: ...


class InMemorySlotStore:
    """Dict-backed store; every primitive is atomic under one lock."""

    def __init__(self):
        self._items: dict[tuple[str, str], Slot] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    # ── Write ────────────────────────────────────────────────────────────

    def put_if_absent(self, slot: Slot) -> PutResult:
        with self._lock:
            if slot.key in self._items:
                return PutResult.ALREADY_EXISTS
            self._items[slot.key] = slot
            return PutResult.CREATED

    def compare_and_set(
        self,
        carer_id: str,
        date_time_slot: str,
        expected: Availability,
        new_slot: Slot,
    ) -> CasResult:
        key = (carer_id, date_time_slot)
        if new_slot.key != key:
            raise ValueError("slot identity is immutable")

        with self._lock:
            current = self._items.get(key)
            if current is None or current.availability != expected:
                return CasResult.PRECONDITION_FAILED
            self._items[key] = new_slot
            return CasResult.OK

    # ── Read ─────────────────────────────────────────────────────────────

    def get(self, carer_id: str, date_time_slot: str) -> Optional[Slot]:
        with self._lock:
            return self._items.get((carer_id, date_time_slot))

    def get_by_partition(self, carer_id: str) -> list[Slot]:
        with self._lock:
            return [s for (c, _), s in self._items.items() if c == carer_id]

    def get_by_partition_and_prefix(self, carer_id: str, prefix: str) -> list[Slot]:
        with self._lock:
            return [
                s for (c, dts), s in self._items.items()
                if c == carer_id and dts.startswith(prefix)
            ]

    def scan_all(self) -> Iterator[Slot]:
        with self._lock:
            snapshot = list(self._items.values())
        return iter(snapshot)
