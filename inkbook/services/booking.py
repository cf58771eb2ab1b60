# inkbook/services/booking.py
from __future__ import annotations

import secrets
from datetime import date, datetime, timedelta, timezone
from typing import Any, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

from inkbook.core.business import (
    AppointmentStatus,
    ShopHours,
    can_transition,
    day_window,
    ends_at,
    format_duration,
    get_service,
    initial_status,
)
from inkbook.core.errors import (
    AppointmentNotFound,
    CancellationRejected,
    InvalidStatusTransition,
    SlotUnavailable,
)
from inkbook.core.logging import get_logger
from inkbook.crud.appointment import AppointmentRepository, as_utc
from inkbook.db.models.appointment import Appointment
from inkbook.services.assignment import assign_artist
from inkbook.services.availability import (
    AnyArtist,
    ArtistChoice,
    SpecificArtist,
    artist_choice,
    find_on_roster,
    iter_grid,
)
from inkbook.services.overlap import has_conflict

logger = get_logger(__name__)

GUEST_CLIENT_ID = "guest"


# ---------- Public contract returned to the route ----------

class BookingRequest(BaseModel):
    service_id: str
    day: date
    time: str = Field(..., pattern=r"^\d{2}:\d{2}$", description="Slot label, HH:mm")
    artist_id: Optional[int] = Field(None, description="None books any free artist")
    client_name: str
    client_email: Optional[str] = None
    client_phone: Optional[str] = None
    client_id: str = GUEST_CLIENT_ID
    description: Optional[str] = None

    @property
    def choice(self) -> ArtistChoice:
        return artist_choice(self.artist_id)


class BookResult(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    appointment: Appointment
    message: str = Field(..., description="Plain sentence to show the client")


# ---------- Internal helpers ----------

def _compose_success_message(artist_name: str, starts_at: datetime, duration_min: int,
                             status: AppointmentStatus, hours: ShopHours) -> str:
    local = starts_at.astimezone(hours.tz)
    when = local.strftime("%A, %B %d at %H:%M")
    if status is AppointmentStatus.PENDING:
        return f"Requested {format_duration(duration_min)} with {artist_name} on {when}. We'll confirm shortly."
    return f"Booked {format_duration(duration_min)} with {artist_name} on {when}. See you then!"


async def _load(repo: AppointmentRepository, appointment_id: Any) -> Appointment:
    appt = await repo.get_appointment(appointment_id)
    if appt is None:
        raise AppointmentNotFound(f"Appointment {appointment_id} not found")
    return appt


# ---------- Core orchestration ----------

async def book_appointment(
    repo: AppointmentRepository,
    roster: Sequence[Any],
    request: BookingRequest,
    hours: ShopHours | None = None,
    *,
    status: Optional[AppointmentStatus] = None,
    now: Optional[datetime] = None,
) -> BookResult:
    """
    Resolve the artist and persist the appointment.

    1) Service -> duration, slot label -> start/end in shop time
    2) The label must be one of the day's grid slots and not in the past
    3) SpecificArtist is taken as-is; AnyArtist goes through the resolver
    4) Insert with the service's initial status (or ``status`` if given)

    The availability read and this write are not isolated: two clients can
    both see a slot free and both book it.
    """
    hours = hours or ShopHours()
    service = get_service(request.service_id)

    grid = {slot.label for slot in iter_grid(request.day, service.duration_minutes, hours)}
    if request.time not in grid:
        raise ValueError(
            f"{request.time} is not a bookable start time for a {format_duration(service.duration_minutes)} session"
        )
    start = hours.at(request.day, request.time)
    end = ends_at(start, service.duration_minutes)

    now = now or datetime.now(timezone.utc)
    if start < now:
        raise ValueError("Cannot book appointments in the past")

    choice = request.choice
    if isinstance(choice, SpecificArtist):
        artist = find_on_roster(choice.artist_id, roster)
    elif isinstance(choice, AnyArtist):
        artist = await assign_artist(repo, start, end, roster, hours.tz)
        if artist is None:
            raise SlotUnavailable("Sorry, the selected slot is no longer available.")
    else:
        raise TypeError(f"Unsupported artist choice: {choice!r}")

    status = status or initial_status(service)
    appt = await repo.create_appointment(
        artist_id=artist.id,
        artist_name=artist.display_name,
        client_id=request.client_id or GUEST_CLIENT_ID,
        client_name=request.client_name,
        client_email=request.client_email,
        client_phone=request.client_phone,
        description=request.description,
        type=service.id,
        starts_at=start,
        ends_at=end,
        status=status.value,
        cancellation_token=secrets.token_urlsafe(32),
    )

    logger.info("appointment_created", appointment_id=appt.id, artist_id=artist.id,
                service=service.id, status=status.value)
    return BookResult(
        appointment=appt,
        message=_compose_success_message(artist.display_name, start,
                                         service.duration_minutes, status, hours),
    )


async def update_status(
    repo: AppointmentRepository,
    appointment_id: Any,
    new_status: AppointmentStatus,
) -> Appointment:
    appt = await _load(repo, appointment_id)
    if not can_transition(appt.status, new_status.value):
        raise InvalidStatusTransition(
            f"Cannot move appointment {appointment_id} from {appt.status} to {new_status.value}"
        )
    updated = await repo.update_appointment(appointment_id, status=new_status.value)
    logger.info("appointment_status_changed", appointment_id=appointment_id,
                old=appt.status, new=new_status.value)
    return updated


async def reschedule(
    repo: AppointmentRepository,
    appointment_id: Any,
    new_start: datetime,
    new_end: datetime,
    hours: ShopHours | None = None,
) -> Appointment:
    """Move an active appointment, keeping its artist; refuses a clash with that artist's other bookings."""
    hours = hours or ShopHours()
    if new_end <= new_start:
        raise ValueError("new_end must be after new_start")

    appt = await _load(repo, appointment_id)
    if appt.status not in (AppointmentStatus.PENDING.value, AppointmentStatus.UPCOMING.value):
        raise InvalidStatusTransition(f"Cannot reschedule a {appt.status} appointment")

    window_start, window_end = day_window(hours.local_day(new_start), hours.tz)
    same_day = await repo.query_by_date_range(window_start, window_end, artist_id=appt.artist_id)
    if has_conflict(appt.artist_id, new_start, new_end, same_day, ignore_appointment_id=appt.id):
        raise SlotUnavailable("The artist is already booked at that time.")

    updated = await repo.update_appointment(appointment_id, starts_at=new_start, ends_at=new_end)
    logger.info("appointment_rescheduled", appointment_id=appointment_id,
                starts_at=as_utc(new_start).isoformat())
    return updated


async def cancel_by_token(
    repo: AppointmentRepository,
    appointment_id: Any,
    token: str,
    *,
    now: Optional[datetime] = None,
    notice_hours: int = 24,
) -> Appointment:
    """Client self-service cancellation via the emailed token."""
    appt = await repo.get_appointment(appointment_id)
    if appt is None:
        raise CancellationRejected("Appointment not found", code="NOT_FOUND")

    if not appt.cancellation_token or not secrets.compare_digest(appt.cancellation_token, token):
        raise CancellationRejected("Invalid cancellation link", code="INVALID_TOKEN")

    if appt.status in (AppointmentStatus.CANCELLED.value, AppointmentStatus.DECLINED.value):
        raise CancellationRejected("Appointment is already cancelled", code="ALREADY_CANCELLED")
    if appt.status == AppointmentStatus.COMPLETED.value:
        raise CancellationRejected("Appointment is already completed", code="ALREADY_COMPLETED")

    now = now or datetime.now(timezone.utc)
    starts_at = as_utc(appt.starts_at)
    if starts_at <= now:
        raise CancellationRejected("Appointment has already taken place", code="ALREADY_COMPLETED")
    if starts_at - now < timedelta(hours=notice_hours):
        raise CancellationRejected(
            f"Appointments can only be cancelled {notice_hours} hours in advance", code="TOO_LATE"
        )

    updated = await repo.update_appointment(appointment_id, status=AppointmentStatus.CANCELLED.value)
    logger.info("appointment_cancelled_by_client", appointment_id=appointment_id)
    return updated
