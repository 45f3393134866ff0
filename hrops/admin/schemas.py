"""Admin Pydantic schemas — organisation settings."""


import re
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

_HH_MM = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


class AttendanceSettings(BaseModel):
    """Thresholds consumed by the attendance status calculation."""

    full_day_hours: float = Field(..., gt=0, le=24)
    half_day_min_hours: float = Field(..., gt=0, le=24)
    working_hours_start: str = "09:00"
    working_hours_end: str = "18:00"

    @field_validator("working_hours_start", "working_hours_end")
    @classmethod
    def validate_clock(cls, v: str) -> str:
        if not _HH_MM.match(v):
            raise ValueError("Expected a time in HH:MM format.")
        return v

    @model_validator(mode="after")
    def validate_bands(self) -> "AttendanceSettings":
        if self.half_day_min_hours > self.full_day_hours:
            raise ValueError("half_day_min_hours must not exceed full_day_hours.")
        return self


class AttendanceSettingsUpdate(BaseModel):
    full_day_hours: Optional[float] = Field(None, gt=0, le=24)
    half_day_min_hours: Optional[float] = Field(None, gt=0, le=24)
    working_hours_start: Optional[str] = None
    working_hours_end: Optional[str] = None
