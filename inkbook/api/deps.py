# inkbook/api/deps.py
from typing import Sequence

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from inkbook.core.business import ShopHours
from inkbook.core.config import Settings, get_settings
from inkbook.crud.appointment import AppointmentRepository, SqlAppointmentRepository
from inkbook.crud.user import list_artists
from inkbook.db.models.user import User
from inkbook.db.session import get_session


def get_shop_hours(settings: Settings = Depends(get_settings)) -> ShopHours:
    return ShopHours.from_settings(settings)


def get_appointment_repository(
    db: AsyncSession = Depends(get_session),
    settings: Settings = Depends(get_settings),
) -> AppointmentRepository:
    return SqlAppointmentRepository(db, timeout_seconds=settings.REPOSITORY_TIMEOUT_SECONDS)


async def get_roster(db: AsyncSession = Depends(get_session)) -> Sequence[User]:
    return await list_artists(db)
