"""Payroll ORM model: one amount per user per period label.

SQLAlchemy 2.0 async-compatible model.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hrops.common.constants import PayrollStatus
from hrops.common.models import enum_column
from hrops.database import Base


class PayrollRecord(Base):
    """A user's pay for one period."""

    __tablename__ = "payroll_records"
    __table_args__ = (
        sa.UniqueConstraint("user_id", "month", name="uq_payroll_user_month"),
        sa.CheckConstraint("amount >= 0", name="ck_payroll_amount_non_negative"),
    )

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        sa.Integer, sa.ForeignKey("users.id"), nullable=False, index=True,
    )
    month: Mapped[str] = mapped_column(sa.String(20), nullable=False)
    amount: Mapped[Decimal] = mapped_column(sa.Numeric(12, 2), nullable=False)
    status: Mapped[PayrollStatus] = mapped_column(
        enum_column(PayrollStatus, "payroll_status"),
        nullable=False,
        default=PayrollStatus.pending,
    )
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    user: Mapped["hrops.users.models.User"] = relationship(lazy="joined")

    def __repr__(self) -> str:
        return f"<PayrollRecord user={self.user_id} {self.month!r} {self.status.value}>"
