"""Attendance ORM model: one record per user per calendar day."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hrops.common.constants import AttendanceStatus
from hrops.common.models import enum_column
from hrops.database import Base
from hrops.rules import attendance_status


class AttendanceRecord(Base):
    __tablename__ = "attendance_records"
    __table_args__ = (
        sa.UniqueConstraint("user_id", "date", name="uq_attendance_user_date"),
        sa.CheckConstraint(
            "check_out IS NULL OR check_in IS NULL OR check_out >= check_in",
            name="ck_attendance_checkout_after_checkin",
        ),
    )

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        sa.Integer, sa.ForeignKey("users.id"), nullable=False, index=True
    )
    date: Mapped[date] = mapped_column(sa.Date, nullable=False)
    status: Mapped[AttendanceStatus] = mapped_column(
        enum_column(AttendanceStatus, "attendance_status"),
        nullable=False,
        default=AttendanceStatus.present,
    )
    check_in: Mapped[Optional[datetime]] = mapped_column(sa.DateTime(timezone=True))
    check_out: Mapped[Optional[datetime]] = mapped_column(sa.DateTime(timezone=True))
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    user: Mapped["hrops.users.models.User"] = relationship(lazy="joined")

    @property
    def worked_hours(self) -> Optional[float]:
        if self.check_in is None or self.check_out is None:
            return None
        return round(attendance_status.worked_hours(self.check_in, self.check_out), 2)

    def __repr__(self) -> str:
        return f"<AttendanceRecord user={self.user_id} {self.date} {self.status.value}>"
