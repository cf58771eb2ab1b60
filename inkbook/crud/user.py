# inkbook/crud/user.py

from __future__ import annotations
from typing import Optional, Sequence

import sqlalchemy as sa
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from inkbook.db.models.user import ROLE_ARTIST, User


async def list_artists(db: AsyncSession) -> Sequence[User]:
    """The roster. Order is significant: the "any artist" resolver is first-fit over it."""
    q = sa.select(User).where(User.role == ROLE_ARTIST).order_by(User.id.asc())
    res = await db.execute(q)
    return res.scalars().all()


async def get_artist(db: AsyncSession, artist_id: int) -> Optional[User]:
    user = await db.get(User, artist_id)
    if user is None or user.role != ROLE_ARTIST:
        return None
    return user


async def create_user(
    db: AsyncSession,
    *,
    email: str,
    first_name: str,
    last_name: str = "",
    role: str = ROLE_ARTIST,
    bio: Optional[str] = None,
) -> User:
    user = User(email=email, first_name=first_name, last_name=last_name, role=role, bio=bio)
    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ValueError(f"A user with email {email} already exists.")
    await db.refresh(user)
    return user
