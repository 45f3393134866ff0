"""Payroll Pydantic v2 schemas."""


from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from hrops.common.constants import PayrollStatus
from hrops.common.pagination import PaginationMeta
from hrops.users.schemas import UserBrief

_INITIAL_STATUSES = (PayrollStatus.pending, PayrollStatus.processing)


class PayrollCreate(BaseModel):
    user_id: int = Field(..., gt=0)
    month: str = Field(..., min_length=1, max_length=20, description='Period label, e.g. "2025-01"')
    amount: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)
    status: PayrollStatus = PayrollStatus.pending

    @field_validator("month")
    @classmethod
    def strip_month(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("month must not be blank")
        return v

    @field_validator("status")
    @classmethod
    def initial_status(cls, v: PayrollStatus) -> PayrollStatus:
        if v not in _INITIAL_STATUSES:
            raise ValueError("a new payroll record must start as Pending or Processing")
        return v


class PayrollStatusUpdate(BaseModel):
    status: PayrollStatus


class PayrollOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    month: str
    amount: Decimal
    status: PayrollStatus
    created_at: Optional[datetime] = None
    user: Optional[UserBrief] = None


class PayrollListResponse(BaseModel):
    data: list[PayrollOut]
    meta: PaginationMeta
