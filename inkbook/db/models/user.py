# inkbook/db/models/user.py

from __future__ import annotations
from datetime import datetime, timezone

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column, relationship

from inkbook.db.session import Base

ROLE_ARTIST = "artist"
ROLE_CLIENT = "client"


class User(Base):
    __tablename__ = "users"
    __table_args__ = (
        sa.Index("ix_users_role", "role"),
    )

    id: Mapped[int] = mapped_column(sa.BigInteger().with_variant(sa.Integer, "sqlite"),
                                    primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(sa.String(254), nullable=False, unique=True)
    first_name: Mapped[str] = mapped_column(sa.String(80), nullable=False)
    last_name: Mapped[str] = mapped_column(sa.String(80), nullable=False, server_default="")
    role: Mapped[str] = mapped_column(sa.String(16), nullable=False, server_default=ROLE_CLIENT)
    bio: Mapped[str | None] = mapped_column(sa.Text)

    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    appointments: Mapped[list["Appointment"]] = relationship(
        back_populates="artist",
        cascade="all, delete-orphan",
    )

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
