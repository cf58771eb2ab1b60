# inkbook/api/routes/availability.py
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from inkbook.api.deps import get_appointment_repository, get_roster, get_shop_hours
from inkbook.core.business import ShopHours, get_service
from inkbook.schemas.appointment import AvailabilityOut
from inkbook.services.availability import artist_choice, fetch_availability

router = APIRouter(prefix="/availability", tags=["availability"])


@router.get("", response_model=AvailabilityOut)
async def get_availability(
    day: date = Query(..., alias="date", description="Calendar day, YYYY-MM-DD"),
    service: str = Query(..., description="Service option id"),
    artist_id: Optional[int] = Query(None, description="Omit for any artist"),
    repo=Depends(get_appointment_repository),
    roster=Depends(get_roster),
    hours: ShopHours = Depends(get_shop_hours),
):
    option = get_service(service)
    times = await fetch_availability(
        repo, day, option.duration_minutes, artist_choice(artist_id), roster, hours
    )
    return AvailabilityOut(
        date=day,
        service=option.id,
        duration_minutes=option.duration_minutes,
        artist_id=artist_id,
        times=times,
    )
