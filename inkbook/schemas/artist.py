# inkbook/schemas/artist.py
from datetime import datetime as _Datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ArtistCreate(BaseModel):
    email: str = Field(..., min_length=3, max_length=254)
    first_name: str = Field(..., min_length=1, max_length=80)
    last_name: str = Field("", max_length=80)
    bio: Optional[str] = None

    @field_validator("first_name", "last_name")
    @classmethod
    def _clean(cls, v: str) -> str:
        return " ".join(v.strip().split())

    @field_validator("email")
    @classmethod
    def _lower_email(cls, v: str) -> str:
        v = v.strip().lower()
        if "@" not in v:
            raise ValueError("email must contain '@'")
        return v


class ArtistOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    first_name: str
    last_name: str
    bio: Optional[str] = None
    created_at: _Datetime


class ServiceOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    label: str
    description: str
    duration_minutes: int
    requires_deposit: bool
