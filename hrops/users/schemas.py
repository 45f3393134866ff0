"""User Pydantic v2 schemas — request / response validation."""


from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from hrops.common.constants import PredefinedRole
from hrops.common.pagination import PaginationMeta


# ── Embedded / shared ───────────────────────────────────────────────

class UserBrief(BaseModel):
    """Owner info embedded in attendance / leave / payroll responses."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    role: str
    department: Optional[str] = None


class UserOut(UserBrief):
    created_at: Optional[datetime] = None


class UserListResponse(BaseModel):
    data: list[UserOut]
    meta: PaginationMeta


# ── Requests ────────────────────────────────────────────────────────

class UserCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=150)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    role: PredefinedRole
    department: Optional[str] = Field(None, max_length=150)

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()


class RoleChangeRequest(BaseModel):
    role: PredefinedRole
