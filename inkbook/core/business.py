# inkbook/core/business.py
from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from zoneinfo import ZoneInfo

from inkbook.core.config import Settings
from inkbook.core.errors import UnknownService

UTC = ZoneInfo("UTC")


# ---------- Shop hours ----------

@dataclass(frozen=True)
class ShopHours:
    """Daily bookable window and slot grid, in shop-local time."""

    tz: ZoneInfo = ZoneInfo("America/Edmonton")
    open_time: time = time(10, 0)
    close_time: time = time(20, 0)
    slot_interval_min: int = 30

    @classmethod
    def from_settings(cls, settings: Settings) -> "ShopHours":
        return cls(
            tz=ZoneInfo(settings.SHOP_TIMEZONE),
            open_time=settings.SHOP_OPEN_TIME,
            close_time=settings.SHOP_CLOSE_TIME,
            slot_interval_min=settings.SLOT_INTERVAL_MIN,
        )

    def opening(self, day: date) -> datetime:
        return datetime.combine(day, self.open_time, tzinfo=self.tz)

    def closing(self, day: date) -> datetime:
        return datetime.combine(day, self.close_time, tzinfo=self.tz)

    def at(self, day: date, label: str) -> datetime:
        """Shop-local datetime for an ``HH:mm`` slot label on ``day``."""
        hours, minutes = (int(part) for part in label.split(":"))
        return datetime.combine(day, time(hours, minutes), tzinfo=self.tz)

    def local_day(self, moment: datetime) -> date:
        return moment.astimezone(self.tz).date()


def day_window(day: date, tz: ZoneInfo) -> tuple[datetime, datetime]:
    """Closed [start_of_day, end_of_day] range for ``day`` in ``tz``."""
    start = datetime.combine(day, time.min, tzinfo=tz)
    end = datetime.combine(day, time.max, tzinfo=tz)
    return start, end


def slot_label(moment: datetime, tz: ZoneInfo) -> str:
    return moment.astimezone(tz).strftime("%H:%M")


# ---------- Service catalog ----------

@dataclass(frozen=True)
class ServiceOption:
    id: str
    label: str
    description: str
    duration_minutes: int
    requires_deposit: bool = True


SERVICE_OPTIONS: tuple[ServiceOption, ...] = (
    ServiceOption("consultation", "Consultation",
                  "First time meeting to discuss ideas (30 min)", 30, requires_deposit=False),
    ServiceOption("small", "Small Tattoo",
                  "Simple design, approx 5-10cm (1 hour)", 60),
    ServiceOption("medium", "Medium Tattoo",
                  "More detailed, palm size (2 hours)", 120),
    ServiceOption("large", "Large Tattoo",
                  "Complex design, hand size or larger (3 hours)", 180),
    ServiceOption("extra-large", "Extra Large / Session",
                  "Very complex or half-day session (4 hours)", 240),
)

_SERVICES_BY_ID = {s.id: s for s in SERVICE_OPTIONS}


def get_service(service_id: str) -> ServiceOption:
    try:
        return _SERVICES_BY_ID[service_id]
    except KeyError:
        raise UnknownService(f"Unknown service '{service_id}'")


def format_duration(minutes: int) -> str:
    if minutes >= 60:
        hours, mins = divmod(minutes, 60)
        if mins:
            return f"{hours}h {mins}m"
        return f"{hours} hour{'s' if hours > 1 else ''}"
    return f"{minutes} minutes"


# ---------- Appointment status ----------

class AppointmentStatus(str, enum.Enum):
    PENDING = "pending"
    UPCOMING = "upcoming"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    DECLINED = "declined"


# Only these block a time range; completed is historical and excluded too.
ACTIVE_STATUSES = frozenset({AppointmentStatus.PENDING, AppointmentStatus.UPCOMING})

ALLOWED_TRANSITIONS: dict[AppointmentStatus, frozenset[AppointmentStatus]] = {
    AppointmentStatus.PENDING: frozenset({
        AppointmentStatus.UPCOMING,
        AppointmentStatus.DECLINED,
        AppointmentStatus.CANCELLED,
    }),
    AppointmentStatus.UPCOMING: frozenset({
        AppointmentStatus.COMPLETED,
        AppointmentStatus.CANCELLED,
    }),
}


def is_active(status: str) -> bool:
    try:
        return AppointmentStatus(status) in ACTIVE_STATUSES
    except ValueError:
        return False


def can_transition(current: str, new: str) -> bool:
    allowed = ALLOWED_TRANSITIONS.get(AppointmentStatus(current), frozenset())
    return AppointmentStatus(new) in allowed


def initial_status(service: ServiceOption) -> AppointmentStatus:
    """Deposit-gated services wait for approval; free consultations go straight in."""
    if service.requires_deposit:
        return AppointmentStatus.PENDING
    return AppointmentStatus.UPCOMING


def ends_at(starts_at: datetime, duration_minutes: int) -> datetime:
    return starts_at + timedelta(minutes=duration_minutes)
