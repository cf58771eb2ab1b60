# inkbook/crud/appointment.py

from __future__ import annotations
import asyncio
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Awaitable, Optional, Protocol, Sequence, TypeVar

import sqlalchemy as sa
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from inkbook.core.errors import AppointmentNotFound, RepositoryTimeout, RepositoryUnavailable
from inkbook.core.logging import get_logger
from inkbook.db.models.appointment import Appointment

logger = get_logger(__name__)

T = TypeVar("T")


def as_utc(value: datetime) -> datetime:
    """Normalize to aware UTC. Naive values (e.g. read back from SQLite) are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass(frozen=True)
class AppointmentWindow:
    """The scheduling-relevant slice of an appointment."""

    artist_id: Any
    start: datetime
    end: datetime
    status: str
    appointment_id: Any = None

    @classmethod
    def from_row(cls, row: Appointment) -> "AppointmentWindow":
        return cls(
            artist_id=row.artist_id,
            start=as_utc(row.starts_at),
            end=as_utc(row.ends_at),
            status=row.status,
            appointment_id=row.id,
        )


class AppointmentRepository(Protocol):
    """
    Storage seam for scheduling and booking.

    Reads and writes are independent; nothing here holds a transaction open
    between an availability check and the insert that follows it. A stricter
    store (conditional write on artist + time range) can implement the same
    protocol.
    """

    async def query_by_date_range(
        self,
        start_inclusive: datetime,
        end_inclusive: datetime,
        artist_id: Any = None,
    ) -> Sequence[AppointmentWindow]: ...

    async def create_appointment(self, **fields: Any) -> Appointment: ...

    async def get_appointment(self, appointment_id: Any) -> Optional[Appointment]: ...

    async def update_appointment(self, appointment_id: Any, **fields: Any) -> Appointment: ...


# ---------- Plain CRUD helpers ----------

async def list_appointments(
    db: AsyncSession,
    *,
    artist_id: Optional[int] = None,
    start_utc: Optional[datetime] = None,
    end_utc: Optional[datetime] = None,
    limit: Optional[int] = None,
) -> Sequence[Appointment]:
    """Appointments whose start lies in the closed range [start_utc, end_utc]. No status filter."""
    q = sa.select(Appointment)
    if artist_id is not None:
        q = q.where(Appointment.artist_id == artist_id)
    if start_utc is not None:
        q = q.where(Appointment.starts_at >= as_utc(start_utc))
    if end_utc is not None:
        q = q.where(Appointment.starts_at <= as_utc(end_utc))
    q = q.order_by(Appointment.starts_at.asc(), Appointment.id.asc())
    if limit is not None:
        q = q.limit(limit)
    res = await db.execute(q)
    return res.scalars().all()


async def create_appointment(db: AsyncSession, **fields: Any) -> Appointment:
    fields["starts_at"] = as_utc(fields["starts_at"])
    fields["ends_at"] = as_utc(fields["ends_at"])
    appt = Appointment(**fields)
    db.add(appt)
    await db.commit()
    await db.refresh(appt)
    return appt


async def get_appointment(db: AsyncSession, appointment_id: int) -> Optional[Appointment]:
    return await db.get(Appointment, appointment_id)


async def update_appointment(db: AsyncSession, appointment_id: int, **fields: Any) -> Appointment:
    appt = await db.get(Appointment, appointment_id)
    if appt is None:
        raise AppointmentNotFound(f"Appointment {appointment_id} not found")
    for key in ("starts_at", "ends_at"):
        if key in fields:
            fields[key] = as_utc(fields[key])
    for key, value in fields.items():
        setattr(appt, key, value)
    await db.commit()
    await db.refresh(appt)
    return appt


# ---------- Repository over an AsyncSession ----------

class SqlAppointmentRepository:
    """AppointmentRepository backed by SQLAlchemy, with a per-call timeout."""

    def __init__(self, db: AsyncSession, *, timeout_seconds: Optional[float] = None):
        self.db = db
        self.timeout_seconds = timeout_seconds

    async def _run(self, operation: str, coro: Awaitable[T]) -> T:
        try:
            if self.timeout_seconds:
                return await asyncio.wait_for(coro, timeout=self.timeout_seconds)
            return await coro
        except asyncio.TimeoutError:
            logger.error("repository_timeout", operation=operation, timeout=self.timeout_seconds)
            raise RepositoryTimeout(f"{operation} timed out after {self.timeout_seconds}s")
        except SQLAlchemyError as e:
            logger.error("repository_error", operation=operation, error=str(e),
                         error_type=type(e).__name__)
            await self.db.rollback()
            raise RepositoryUnavailable(f"{operation} failed: {e}") from e

    async def query_by_date_range(
        self,
        start_inclusive: datetime,
        end_inclusive: datetime,
        artist_id: Any = None,
    ) -> list[AppointmentWindow]:
        rows = await self._run(
            "query_by_date_range",
            list_appointments(self.db, artist_id=artist_id,
                              start_utc=start_inclusive, end_utc=end_inclusive),
        )
        return [AppointmentWindow.from_row(r) for r in rows]

    async def create_appointment(self, **fields: Any) -> Appointment:
        return await self._run("create_appointment", create_appointment(self.db, **fields))

    async def get_appointment(self, appointment_id: Any) -> Optional[Appointment]:
        return await self._run("get_appointment", get_appointment(self.db, appointment_id))

    async def update_appointment(self, appointment_id: Any, **fields: Any) -> Appointment:
        return await self._run("update_appointment",
                               update_appointment(self.db, appointment_id, **fields))

    async def list_appointments(self, **filters: Any) -> Sequence[Appointment]:
        return await self._run("list_appointments", list_appointments(self.db, **filters))
