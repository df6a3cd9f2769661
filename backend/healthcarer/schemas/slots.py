# backend/healthcarer/schemas/slots.py
"""
Pydantic schemas for slots.

Wire shape of a slot:
    {carer_id, date_time_slot, availability, booking_person_name?, date, time_slot}
where date_time_slot = date + "#" + time_slot.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, model_validator

KEY_SEPARATOR = "#"


def make_date_time_slot(date: str, time_slot: str) -> str:
    """Sort-key component of a slot: "YYYYMMDD#HHMM"."""
    return f"{date}{KEY_SEPARATOR}{time_slot}"


class Availability(str, Enum):
    FREE = "Free"
    BOOKED = "Booked"


class Slot(BaseModel):
    """One bookable (carer, date, time) unit."""
    carer_id: str
    date_time_slot: str
    availability: Availability = Availability.FREE
    booking_person_name: Optional[str] = None
    date: str
    time_slot: str

    model_config = {"from_attributes": True}

    @model_validator(mode="after")
    def check_invariants(self) -> "Slot":
        if self.date_time_slot != make_date_time_slot(self.date, self.time_slot):
            raise ValueError("date_time_slot must equal date + '#' + time_slot")
        booked = self.availability == Availability.BOOKED
        if booked != (self.booking_person_name is not None):
            raise ValueError("booking_person_name is present iff availability is Booked")
        return self

    @classmethod
    def free(cls, carer_id: str, date: str, time_slot: str) -> "Slot":
        return cls(
            carer_id=carer_id,
            date_time_slot=make_date_time_slot(date, time_slot),
            availability=Availability.FREE,
            date=date,
            time_slot=time_slot,
        )

    @property
    def key(self) -> tuple[str, str]:
        return self.carer_id, self.date_time_slot

    def booked_by(self, person_name: str) -> "Slot":
        return self.model_copy(update={
            "availability": Availability.BOOKED,
            "booking_person_name": person_name,
        })

    def to_wire(self) -> dict:
        """JSON-ready dict; booking_person_name omitted while Free."""
        return self.model_dump(mode="json", exclude_none=True)


# ── Requests ────────────────────────────────────────────────────────────
# Fields are optional at the schema level so missing values reach the
# operation layer and come back as one "Missing required fields" error.

class BookingRequest(BaseModel):
    carer_id: Optional[str] = Field(None, description="Carer ID")
    date: Optional[str] = Field(None, description="Date in YYYYMMDD format")
    time_slot: Optional[str] = Field(None, description="Time slot in HHMM format")
    person_name: Optional[str] = Field(None, description="Name of person booking")


class CancelRequest(BaseModel):
    carer_id: Optional[str] = Field(None, description="Carer ID")
    date: Optional[str] = Field(None, description="Date in YYYYMMDD format")
    time_slot: Optional[str] = Field(None, description="Time slot in HHMM format")


# ── Responses ───────────────────────────────────────────────────────────

class OperationResult(BaseModel):
    """Outcome of a book/cancel attempt."""
    success: bool
    message: str


class InitializeResult(BaseModel):
    """Counts from one seeding run."""
    created: int = 0
    existing: int = 0


class InitializeResponse(BaseModel):
    success: bool = True
    message: str = "Time slots initialized successfully"
    created: int = 0
    existing: int = 0


class AvailabilityResponse(BaseModel):
    success: bool = True
    data: list[Slot]


class CarersResponse(BaseModel):
    success: bool = True
    data: list[str]
