# backend/healthcarer/services/slots/query.py
"""
Availability query planner.

    carer_id + date  → partition range read, sort key prefix = date
    carer_id only    → whole partition
    date only        → full scan, filtered by sort key prefix
    nothing          → full scan

The full scan is unbounded. Results are sorted by (carer_id, date_time_slot);
`limit` keeps the first N of that order.
"""

from typing import Iterable, Optional

from ...schemas.slots import Slot
from .store import SlotStore


def plan(carer_id: Optional[str], date: Optional[str]) -> str:
    """Name of the access pattern a query will use."""
    if carer_id and date:
        return "partition_prefix"
    if carer_id:
        return "partition"
    return "scan"


def query(
    store: SlotStore,
    carer_id: Optional[str] = None,
    date: Optional[str] = None,
    limit: Optional[int] = None,
) -> list[Slot]:
    access = plan(carer_id, date)

    slots: Iterable[Slot]
    if access == "partition_prefix":
        slots = store.get_by_partition_and_prefix(carer_id, date)
    elif access == "partition":
        slots = store.get_by_partition(carer_id)
    else:
        slots = store.scan_all()
        if date:
            slots = (s for s in slots if s.date_time_slot.startswith(date))

    ordered = sorted(slots, key=lambda s: s.key)
    if limit is not None:
        return ordered[:limit]
    return ordered
