"""
Artist Assignment Resolver

Tie-break is roster order: the first artist without a conflicting active
appointment wins. There is deliberately no load balancing.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Sequence, TypeVar
from zoneinfo import ZoneInfo

from inkbook.core.business import ShopHours, day_window
from inkbook.core.logging import get_logger
from inkbook.crud.appointment import AppointmentRepository, AppointmentWindow
from inkbook.services.overlap import has_conflict

logger = get_logger(__name__)

A = TypeVar("A")


def pick_free_artist(
    start: datetime,
    end: datetime,
    roster: Sequence[A],
    appointments: Sequence[AppointmentWindow],
) -> Optional[A]:
    for artist in roster:
        if not has_conflict(artist.id, start, end, appointments):
            return artist
    return None


async def assign_artist(
    repo: AppointmentRepository,
    start: datetime,
    end: datetime,
    roster: Sequence[A],
    tz: ZoneInfo | None = None,
) -> Optional[A]:
    """
    First roster artist free for [start, end), or None when all are booked.

    Appointments are fetched for the shop-local calendar day containing
    ``start``, keyed on their start time. Callers must keep [start, end)
    inside one day's opening hours; book_appointment only accepts starts on
    the day's grid, so nothing booked can spill past midnight. Read-only.
    """
    tz = tz or ShopHours().tz
    day = start.astimezone(tz).date()
    window_start, window_end = day_window(day, tz)

    appointments = await repo.query_by_date_range(window_start, window_end)
    artist = pick_free_artist(start, end, roster, appointments)

    if artist is None:
        logger.info("no_artist_available", start=start.isoformat(), end=end.isoformat(),
                    roster_size=len(roster))
    else:
        logger.info("artist_assigned", artist_id=artist.id, start=start.isoformat())
    return artist
