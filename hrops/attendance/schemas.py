"""Attendance Pydantic v2 schemas — request / response validation.

Naming conventions:
  - *Create / *Update → request bodies (write)
  - *Out              → response bodies (read)
"""


import datetime as dt
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from hrops.common.constants import AttendanceStatus
from hrops.common.pagination import PaginationMeta
from hrops.users.schemas import UserBrief


class AttendanceCreate(BaseModel):
    """Mark attendance / check in. Everything defaults to "me, today, now"."""

    user_id: Optional[int] = Field(None, gt=0)
    date: Optional[dt.date] = None
    status: Optional[AttendanceStatus] = None
    check_in: Optional[dt.datetime] = None
    check_out: Optional[dt.datetime] = None


class AttendanceUpdate(BaseModel):
    """Check out, or set the status by hand when no check-out is given."""

    check_out: Optional[dt.datetime] = None
    status: Optional[AttendanceStatus] = None


class AttendanceOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    date: dt.date
    status: AttendanceStatus
    check_in: Optional[dt.datetime] = None
    check_out: Optional[dt.datetime] = None
    worked_hours: Optional[float] = None
    user: Optional[UserBrief] = None


class AttendanceListResponse(BaseModel):
    data: list[AttendanceOut]
    meta: PaginationMeta
