"""Leave ORM model: a closed date interval requested by one user."""

from __future__ import annotations

from datetime import date, datetime, timezone

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hrops.common.constants import LeaveStatus
from hrops.common.models import enum_column
from hrops.database import Base


class LeaveRequest(Base):
    __tablename__ = "leave_requests"
    __table_args__ = (
        sa.CheckConstraint("to_date >= from_date", name="ck_leave_dates_ordered"),
        sa.Index("ix_leave_requests_user_dates", "user_id", "from_date", "to_date"),
    )

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        sa.Integer, sa.ForeignKey("users.id"), nullable=False
    )
    reason: Mapped[str] = mapped_column(sa.Text, nullable=False)
    from_date: Mapped[date] = mapped_column(sa.Date, nullable=False)
    to_date: Mapped[date] = mapped_column(sa.Date, nullable=False)
    status: Mapped[LeaveStatus] = mapped_column(
        enum_column(LeaveStatus, "leave_status"),
        nullable=False,
        default=LeaveStatus.pending,
    )
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
    def days(self) -> int:
        return (self.to_date - self.from_date).days + 1

    def __repr__(self) -> str:
        return (
            f"<LeaveRequest user={self.user_id} "
            f"{self.from_date}..{self.to_date} {self.status.value}>"
        )
