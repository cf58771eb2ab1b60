# inkbook/db/models/appointment.py

from __future__ import annotations
from datetime import datetime, timezone

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column, relationship

from inkbook.db.session import Base


class Appointment(Base):
    __tablename__ = "appointments"
    # No uniqueness on (artist_id, starts_at): conflicts are checked in the
    # application before the insert, not by the database.
    __table_args__ = (
        sa.Index("ix_appointments_artist_id_starts_at", "artist_id", "starts_at"),
        sa.Index("ix_appointments_starts_at", "starts_at"),
    )

    id: Mapped[int] = mapped_column(sa.BigInteger().with_variant(sa.Integer, "sqlite"),
                                    primary_key=True, autoincrement=True)
    artist_id: Mapped[int] = mapped_column(
        sa.BigInteger, sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    artist_name: Mapped[str] = mapped_column(sa.String(160), nullable=False, server_default="")

    # "guest" for unauthenticated bookings
    client_id: Mapped[str] = mapped_column(sa.String(128), nullable=False, server_default="guest")
    client_name: Mapped[str] = mapped_column(sa.String(120), nullable=False)
    client_email: Mapped[str | None] = mapped_column(sa.String(254))
    client_phone: Mapped[str | None] = mapped_column(sa.String(20))
    description: Mapped[str | None] = mapped_column(sa.Text)
    type: Mapped[str] = mapped_column(sa.String(32), nullable=False)

    # Store as timezone-aware UTC
    starts_at: Mapped[datetime] = mapped_column(sa.DateTime(timezone=True), nullable=False)
    ends_at: Mapped[datetime] = mapped_column(sa.DateTime(timezone=True), nullable=False)
    status: Mapped[str] = mapped_column(sa.String(16), nullable=False, server_default="pending")
    cancellation_token: Mapped[str | None] = mapped_column(sa.String(64))

    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # Relations
    artist: Mapped["User"] = relationship(back_populates="appointments")
