# backend/healthcarer/routers/slots.py
"""
Slots API endpoints.

POST   /api/initialize                       - Seed the catalogue (idempotent)
GET    /api/availability                     - Slots, filtered by carer_id / date
GET    /api/availability/{carer_id}/{date}   - Slots of one carer on one date
POST   /api/book                             - Free → Booked
DELETE /api/cancel                           - Booked → Free
GET    /api/carers                           - Carer ids of the catalogue
"""

from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from ..schemas.slots import (
    AvailabilityResponse,
    BookingRequest,
    CancelRequest,
    CarersResponse,
    InitializeResponse,
    OperationResult,
)
from ..services.slots import BookingService


router = APIRouter(prefix="/api", tags=["slots"])


def get_booking_service(request: Request) -> BookingService:
    return request.app.state.booking_service


def _result_response(result: OperationResult) -> JSONResponse:
    status_code = 200 if result.success else 400
    return JSONResponse(status_code=status_code, content=result.model_dump())


@router.post("/initialize", response_model=InitializeResponse)
def initialize_slots(service: BookingService = Depends(get_booking_service)):
    """Create every catalogue slot that does not exist yet."""
    result = service.initialize()
    return InitializeResponse(created=result.created, existing=result.existing)


@router.get(
    "/availability",
    response_model=AvailabilityResponse,
    response_model_exclude_none=True,
)
def get_availability(
    carer_id: Optional[str] = None,
    date: Optional[str] = None,
    limit: Optional[int] = None,
    service: BookingService = Depends(get_booking_service),
):
    return AvailabilityResponse(data=service.get_availability(carer_id, date, limit))


@router.get(
    "/availability/{carer_id}/{date}",
    response_model=AvailabilityResponse,
    response_model_exclude_none=True,
)
def get_carer_day_availability(
    carer_id: str,
    date: str,
    service: BookingService = Depends(get_booking_service),
):
    return AvailabilityResponse(data=service.get_availability(carer_id, date))


@router.post("/book", response_model=OperationResult)
def book_appointment(
    data: BookingRequest,
    service: BookingService = Depends(get_booking_service),
):
    result = service.book_appointment(
        data.carer_id, data.date, data.time_slot, data.person_name
    )
    return _result_response(result)


@router.delete("/cancel", response_model=OperationResult)
def cancel_appointment(
    data: CancelRequest,
    service: BookingService = Depends(get_booking_service),
):
    result = service.cancel_appointment(data.carer_id, data.date, data.time_slot)
    return _result_response(result)


@router.get("/carers", response_model=CarersResponse)
def list_carers(service: BookingService = Depends(get_booking_service)):
    return CarersResponse(data=list(service.catalogue.carers))
