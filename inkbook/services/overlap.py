# inkbook/services/overlap.py
from __future__ import annotations

from datetime import datetime
from typing import Any, Iterable

from inkbook.core.business import is_active
from inkbook.crud.appointment import AppointmentWindow


def overlaps(a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime) -> bool:
    """
    Half-open interval overlap: [a_start, a_end) vs [b_start, b_end).

    Touching endpoints (one ends exactly when the other starts) do not overlap.
    """
    return a_start < b_end and a_end > b_start


def has_conflict(
    artist_id: Any,
    start: datetime,
    end: datetime,
    appointments: Iterable[AppointmentWindow],
    *,
    ignore_appointment_id: Any = None,
) -> bool:
    """True if ``artist_id`` has an active appointment overlapping [start, end)."""
    for appt in appointments:
        if appt.artist_id != artist_id or not is_active(appt.status):
            continue
        if ignore_appointment_id is not None and appt.appointment_id == ignore_appointment_id:
            continue
        if overlaps(appt.start, appt.end, start, end):
            return True
    return False
