# backend/healthcarer/services/slots/operations.py
"""
Inbound operations used by every transport (REST, CLI via REST).

    initialize()                                        → InitializeResult
    get_availability(carer_id?, date?)                  → list[Slot]
    book_appointment(carer_id, date, time_slot, name)   → OperationResult
    cancel_appointment(carer_id, date, time_slot)       → OperationResult

Input is validated here, before the store is touched. Business
failures come back as OperationResult(success=False); store failures
propagate as StoreConnectivityError.
"""

import re
from typing import Optional

from ...config import CatalogueConfig
from ...errors import NoActiveBooking, SlotUnavailable, ValidationError
from ...schemas.slots import InitializeResult, OperationResult, Slot
from . import state_machine
from .catalogue import initialize_catalogue
from .query import query
from .store import SlotStore

DATE_RE = re.compile(r"^\d{8}$")
TIME_SLOT_RE = re.compile(r"^\d{4}$")

BOOKED_MESSAGE = "Appointment booked successfully"
CANCELLED_MESSAGE = "Appointment cancelled successfully"


def _require(**fields: Optional[str]) -> None:
    missing = [
        name for name, value in fields.items()
        if not isinstance(value, str) or not value.strip()
    ]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")


def _check_slot_format(date: str, time_slot: str) -> None:
    if not DATE_RE.match(date):
        raise ValidationError(f"Invalid date {date!r}: expected YYYYMMDD")
    if not TIME_SLOT_RE.match(time_slot):
        raise ValidationError(f"Invalid time_slot {time_slot!r}: expected HHMM")


class BookingService:
    """Slot operations bound to one store and one catalogue."""

    def __init__(
        self,
        store: SlotStore,
        catalogue: CatalogueConfig,
        init_workers: int = 16,
    ):
        self.store = store
        self.catalogue = catalogue
        self.init_workers = init_workers

    def initialize(self) -> InitializeResult:
        return initialize_catalogue(self.store, self.catalogue, self.init_workers)

    def get_availability(
        self,
        carer_id: Optional[str] = None,
        date: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> list[Slot]:
        if limit is not None and limit < 1:
            raise ValidationError("limit must be positive")
        return query(self.store, carer_id or None, date or None, limit)

    def book_appointment(
        self,
        carer_id: Optional[str],
        date: Optional[str],
        time_slot: Optional[str],
        person_name: Optional[str],
    ) -> OperationResult:
        _require(carer_id=carer_id, date=date, time_slot=time_slot, person_name=person_name)
        _check_slot_format(date, time_slot)

        try:
            state_machine.book(self.store, carer_id, date, time_slot, person_name)
        except SlotUnavailable as e:
            return OperationResult(success=False, message=e.message)

        return OperationResult(success=True, message=BOOKED_MESSAGE)

    def cancel_appointment(
        self,
        carer_id: Optional[str],
        date: Optional[str],
        time_slot: Optional[str],
    ) -> OperationResult:
        _require(carer_id=carer_id, date=date, time_slot=time_slot)
        _check_slot_format(date, time_slot)

        try:
            state_machine.cancel(self.store, carer_id, date, time_slot)
        except NoActiveBooking as e:
            return OperationResult(success=False, message=e.message)

        return OperationResult(success=True, message=CANCELLED_MESSAGE)
