"""Booking model."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import DateTime, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from labhub.database import Base


class Booking(Base):
    """Booking request against a resource.

    ``resource_id`` is a weak reference: removing the resource leaves its
    bookings in place. The requester columns are a snapshot taken when the
    booking is created and are never refreshed.
    """

    __tablename__ = "bookings"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    resource_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)

    # Requester snapshot
    requester_id: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    requester_name: Mapped[str] = mapped_column(String(200), nullable=False)
    requester_role: Mapped[str] = mapped_column(String(30), nullable=False)
    requester_avatar: Mapped[str | None] = mapped_column(String(500))

    # Time range
    start_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    end_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    purpose: Mapped[str] = mapped_column(Text, nullable=False)
    attendees: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    notes: Mapped[str | None] = mapped_column(Text)

    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="pending", index=True
    )  # pending, approved, rejected, completed, cancelled
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
