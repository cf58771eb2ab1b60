# inkbook/api/routes/catalog.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from inkbook.api.auth import require_admin_key
from inkbook.api.deps import get_roster
from inkbook.core.business import SERVICE_OPTIONS
from inkbook.crud.user import create_user, get_artist
from inkbook.db.session import get_session
from inkbook.schemas.artist import ArtistCreate, ArtistOut, ServiceOut

router = APIRouter(tags=["catalog"])


@router.get("/services", response_model=List[ServiceOut])
async def get_services():
    return [ServiceOut.model_validate(s) for s in SERVICE_OPTIONS]


@router.get("/artists", response_model=List[ArtistOut])
async def get_artists(roster=Depends(get_roster)):
    return roster


@router.get("/artists/{artist_id}", response_model=ArtistOut)
async def get_artist_by_id(artist_id: int, db: AsyncSession = Depends(get_session)):
    artist = await get_artist(db, artist_id)
    if artist is None:
        raise HTTPException(status_code=404, detail="Artist not found")
    return artist


@router.post("/artists", response_model=ArtistOut, status_code=201,
             dependencies=[Depends(require_admin_key)])
async def add_artist(payload: ArtistCreate, db: AsyncSession = Depends(get_session)):
    try:
        return await create_user(
            db,
            email=payload.email,
            first_name=payload.first_name,
            last_name=payload.last_name,
            bio=payload.bio,
        )
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
