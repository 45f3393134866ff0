"""Leave Pydantic v2 schemas."""


from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from hrops.common.constants import LeaveStatus
from hrops.common.pagination import PaginationMeta
from hrops.users.schemas import UserBrief


class LeaveCreate(BaseModel):
    """Apply for leave. ``user_id`` defaults to the caller."""

    user_id: Optional[int] = Field(None, gt=0)
    reason: str = Field(..., min_length=1, max_length=2000)
    from_date: date
    to_date: date
    status: Optional[LeaveStatus] = None


class LeaveReview(BaseModel):
    status: LeaveStatus


class LeaveOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    reason: str
    from_date: date
    to_date: date
    days: int
    status: LeaveStatus
    created_at: Optional[datetime] = None
    user: Optional[UserBrief] = None


class LeaveListResponse(BaseModel):
    data: list[LeaveOut]
    meta: PaginationMeta
