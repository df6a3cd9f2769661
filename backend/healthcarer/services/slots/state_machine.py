# backend/healthcarer/services/slots/state_machine.py
"""
Slot availability state machine.

    Free ──book(name)──▶ Booked
    Free ◀──cancel()──── Booked

Each transition is one conditional write against the store, guarded
on the current state. A failed guard is a business outcome
(SlotUnavailable / NoActiveBooking), not something to retry.
No locks here: the store's compare-and-set is the only arbiter.
"""

import logging

from ...errors import NoActiveBooking, SlotUnavailable
from ...schemas.slots import Availability, Slot, make_date_time_slot
from .store import CasResult, SlotStore

logger = logging.getLogger(__name__)


def book(
    store: SlotStore,
    carer_id: str,
    date: str,
    time_slot: str,
    person_name: str,
) -> Slot:
    """
    Move a slot Free → Booked.

    Raises:
        SlotUnavailable: slot is already Booked or not in the catalogue
        StoreConnectivityError: store failure (from the store)
    """
    date_time_slot = make_date_time_slot(date, time_slot)
    booked = Slot.free(carer_id, date, time_slot).booked_by(person_name)

    outcome = store.compare_and_set(carer_id, date_time_slot, Availability.FREE, booked)
    if outcome != CasResult.OK:
        logger.info(f"Book rejected: {carer_id} {date_time_slot} not free")
        raise SlotUnavailable()

    logger.info(f"Booked: {carer_id} {date_time_slot}")
    return booked


def cancel(
    store: SlotStore,
    carer_id: str,
    date: str,
    time_slot: str,
) -> Slot:
    """
    Move a slot Booked → Free and drop the booking name.

    The record itself stays: slots belong to the fixed catalogue.

    Raises:
        NoActiveBooking: slot is not Booked (or not in the catalogue)
        StoreConnectivityError: store failure (from the store)
    """
    date_time_slot = make_date_time_slot(date, time_slot)
    released = Slot.free(carer_id, date, time_slot)

    outcome = store.compare_and_set(carer_id, date_time_slot, Availability.BOOKED, released)
    if outcome != CasResult.OK:
        logger.info(f"Cancel rejected: {carer_id} {date_time_slot} has no booking")
        raise NoActiveBooking()

    logger.info(f"Cancelled: {carer_id} {date_time_slot}")
    return released
