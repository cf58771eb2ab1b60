"""
Availability Calculator

Lays a fixed grid of start times over the shop's opening hours for one day
and keeps the ones that the requested artist (or at least one roster artist)
can take without overlapping an active appointment.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Iterator, Sequence, Union

from inkbook.core.business import ShopHours, day_window, slot_label
from inkbook.core.errors import ArtistNotFound, RepositoryUnavailable
from inkbook.core.logging import get_logger
from inkbook.crud.appointment import AppointmentRepository, AppointmentWindow
from inkbook.services.overlap import has_conflict

logger = get_logger(__name__)


# ---------- Artist choice ----------

@dataclass(frozen=True)
class SpecificArtist:
    artist_id: Any


@dataclass(frozen=True)
class AnyArtist:
    pass


ArtistChoice = Union[SpecificArtist, AnyArtist]


def artist_choice(artist_id: Any = None) -> ArtistChoice:
    """Build a choice from an optional identifier (None means any artist)."""
    if artist_id is None:
        return AnyArtist()
    return SpecificArtist(artist_id)


def find_on_roster(artist_id: Any, roster: Sequence[Any]) -> Any:
    for artist in roster:
        if artist.id == artist_id:
            return artist
    raise ArtistNotFound(f"Artist {artist_id} is not on the roster")


# ---------- Grid ----------

@dataclass(frozen=True)
class Slot:
    start: datetime
    end: datetime
    label: str


def iter_grid(day: date, duration_minutes: int, hours: ShopHours) -> Iterator[Slot]:
    """Every grid slot on ``day`` that ends at or before closing."""
    if duration_minutes <= 0:
        raise ValueError(f"duration_minutes must be positive, got {duration_minutes}")
    if hours.slot_interval_min <= 0:
        raise ValueError(f"slot interval must be positive, got {hours.slot_interval_min}")

    duration = timedelta(minutes=duration_minutes)
    step = timedelta(minutes=hours.slot_interval_min)
    closing = hours.closing(day)
    current = hours.opening(day)

    while current + duration <= closing:
        yield Slot(start=current, end=current + duration, label=slot_label(current, hours.tz))
        current += step


def _candidate_artists(choice: ArtistChoice, roster: Sequence[Any]) -> list[Any]:
    if isinstance(choice, SpecificArtist):
        return [choice.artist_id]
    if isinstance(choice, AnyArtist):
        return [artist.id for artist in roster]
    raise TypeError(f"Unsupported artist choice: {choice!r}")


def compute_availability(
    day: date,
    duration_minutes: int,
    choice: ArtistChoice,
    appointments: Sequence[AppointmentWindow],
    roster: Sequence[Any],
    hours: ShopHours | None = None,
) -> list[str]:
    """
    Bookable ``HH:mm`` labels for ``day``, ascending.

    A slot is kept when at least one candidate artist has no active
    appointment overlapping it. With AnyArtist and an empty roster nothing is
    ever bookable. Past times are not filtered here.
    """
    hours = hours or ShopHours()
    candidates = _candidate_artists(choice, roster)

    return [
        slot.label
        for slot in iter_grid(day, duration_minutes, hours)
        if any(not has_conflict(a, slot.start, slot.end, appointments) for a in candidates)
    ]


async def fetch_availability(
    repo: AppointmentRepository,
    day: date,
    duration_minutes: int,
    choice: ArtistChoice,
    roster: Sequence[Any],
    hours: ShopHours | None = None,
) -> list[str]:
    """
    Query the day's appointments and compute availability.

    A failed query yields no slots (never show a slot whose status is
    unknown). Timeouts are not swallowed: RepositoryTimeout propagates.
    A SpecificArtist not on ``roster`` raises ArtistNotFound, as booking does.
    """
    hours = hours or ShopHours()
    if isinstance(choice, SpecificArtist):
        find_on_roster(choice.artist_id, roster)
    start, end = day_window(day, hours.tz)

    try:
        appointments = await repo.query_by_date_range(start, end)
    except RepositoryUnavailable as e:
        logger.error("availability_query_failed", day=day.isoformat(), error=str(e))
        return []

    times = compute_availability(day, duration_minutes, choice, appointments, roster, hours)
    logger.debug("availability_computed", day=day.isoformat(),
                 duration=duration_minutes, slots=len(times))
    return times
