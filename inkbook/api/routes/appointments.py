# inkbook/api/routes/appointments.py

from __future__ import annotations
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from inkbook.api.auth import require_admin_key
from inkbook.api.deps import get_appointment_repository, get_roster, get_shop_hours
from inkbook.core.business import AppointmentStatus, ShopHours
from inkbook.core.config import Settings, get_settings
from inkbook.schemas.appointment import (
    AppointmentCreate,
    AppointmentOut,
    BookingOut,
    CancelIn,
    RescheduleIn,
    StatusUpdate,
)
from inkbook.services import booking

router = APIRouter(prefix="/appointments", tags=["appointments"])


def _to_request(payload: AppointmentCreate) -> booking.BookingRequest:
    return booking.BookingRequest(
        service_id=payload.service,
        day=payload.date,
        time=payload.time,
        artist_id=payload.artist_id,
        client_name=payload.client_name,
        client_email=payload.client_email,
        client_phone=payload.client_phone,
        client_id=payload.client_id or booking.GUEST_CLIENT_ID,
        description=payload.description,
    )


def _to_booking_out(result: booking.BookResult) -> BookingOut:
    return BookingOut(
        appointment=AppointmentOut.model_validate(result.appointment),
        message=result.message,
        cancellation_token=result.appointment.cancellation_token,
    )


@router.post("", response_model=BookingOut, status_code=201)
async def book(
    payload: AppointmentCreate,
    repo=Depends(get_appointment_repository),
    roster=Depends(get_roster),
    hours: ShopHours = Depends(get_shop_hours),
):
    result = await booking.book_appointment(repo, roster, _to_request(payload), hours)
    return _to_booking_out(result)


@router.post("/admin", response_model=BookingOut, status_code=201,
             dependencies=[Depends(require_admin_key)])
async def book_manual(
    payload: AppointmentCreate,
    repo=Depends(get_appointment_repository),
    roster=Depends(get_roster),
    hours: ShopHours = Depends(get_shop_hours),
):
    """Manual entry from the dashboard: goes straight to upcoming."""
    result = await booking.book_appointment(
        repo, roster, _to_request(payload), hours, status=AppointmentStatus.UPCOMING
    )
    return _to_booking_out(result)


@router.get("", response_model=List[AppointmentOut], dependencies=[Depends(require_admin_key)])
async def get_appointments(
    repo=Depends(get_appointment_repository),
    start: Optional[datetime] = Query(None, description="Start (ISO, inclusive)"),
    end: Optional[datetime] = Query(None, description="End (ISO, inclusive)"),
    artist_id: Optional[int] = Query(None),
    limit: int = Query(100, ge=1, le=1000),
):
    return await repo.list_appointments(artist_id=artist_id, start_utc=start, end_utc=end, limit=limit)


@router.get("/{appointment_id}", response_model=AppointmentOut,
            dependencies=[Depends(require_admin_key)])
async def get_appointment(appointment_id: int, repo=Depends(get_appointment_repository)):
    appt = await repo.get_appointment(appointment_id)
    if appt is None:
        raise HTTPException(status_code=404, detail="Appointment not found")
    return appt


@router.patch("/{appointment_id}/status", response_model=AppointmentOut,
              dependencies=[Depends(require_admin_key)])
async def change_status(
    appointment_id: int,
    payload: StatusUpdate,
    repo=Depends(get_appointment_repository),
):
    return await booking.update_status(repo, appointment_id, payload.status)


@router.post("/{appointment_id}/reschedule", response_model=AppointmentOut,
             dependencies=[Depends(require_admin_key)])
async def move(
    appointment_id: int,
    payload: RescheduleIn,
    repo=Depends(get_appointment_repository),
    hours: ShopHours = Depends(get_shop_hours),
):
    return await booking.reschedule(repo, appointment_id, payload.starts_at, payload.ends_at, hours)


@router.post("/{appointment_id}/cancel", response_model=AppointmentOut)
async def cancel(
    appointment_id: int,
    payload: CancelIn,
    repo=Depends(get_appointment_repository),
    settings: Settings = Depends(get_settings),
):
    return await booking.cancel_by_token(
        repo, appointment_id, payload.token, notice_hours=settings.CANCELLATION_NOTICE_HOURS
    )
