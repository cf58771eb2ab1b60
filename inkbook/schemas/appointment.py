# inkbook/schemas/appointment.py
from datetime import date as _Date, datetime as _Datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from inkbook.core.business import AppointmentStatus
from inkbook.crud.appointment import as_utc


def _clean_name(v: str) -> str:
    # trim + collapse internal extra spaces
    v = " ".join(v.strip().split())
    if not v:
        raise ValueError("client_name cannot be empty")
    return v


class AppointmentCreate(BaseModel):
    """Incoming booking request from the client flow."""
    service: str = Field(..., description="Service option id, e.g. 'small'")
    date: _Date
    time: str = Field(..., pattern=r"^\d{2}:\d{2}$", description="Slot label HH:mm")
    artist_id: Optional[int] = Field(None, description="Omit or null for any artist")
    client_name: str = Field(..., min_length=1, max_length=120)
    client_email: Optional[str] = Field(None, max_length=254)
    client_phone: Optional[str] = Field(None, max_length=20)
    client_id: Optional[str] = Field(None, max_length=128)
    description: Optional[str] = None

    @field_validator("client_name")
    @classmethod
    def _normalize_name(cls, v: str) -> str:
        return _clean_name(v)

    @field_validator("client_email")
    @classmethod
    def _check_email(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        local, _, domain = v.partition("@")
        if not local or "." not in domain:
            raise ValueError("client_email must be a valid address")
        return v


class AppointmentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    artist_id: int
    artist_name: str
    client_id: str
    client_name: str
    client_email: Optional[str] = None
    client_phone: Optional[str] = None
    description: Optional[str] = None
    type: str
    starts_at: _Datetime
    ends_at: _Datetime
    status: AppointmentStatus

    @field_validator("starts_at", "ends_at")
    @classmethod
    def _utc(cls, v: _Datetime) -> _Datetime:
        return as_utc(v)


class BookingOut(BaseModel):
    appointment: AppointmentOut
    message: str
    cancellation_token: Optional[str] = None


class StatusUpdate(BaseModel):
    status: AppointmentStatus


class RescheduleIn(BaseModel):
    starts_at: _Datetime
    ends_at: _Datetime

    @model_validator(mode="after")
    def _check_order(self):
        if self.starts_at.tzinfo is None or self.ends_at.tzinfo is None:
            raise ValueError("starts_at and ends_at must include a UTC offset")
        if self.ends_at <= self.starts_at:
            raise ValueError("ends_at must be after starts_at")
        return self


class CancelIn(BaseModel):
    token: str = Field(..., min_length=1)


class AvailabilityOut(BaseModel):
    date: _Date
    service: str
    duration_minutes: int
    artist_id: Optional[int] = None
    times: List[str]
