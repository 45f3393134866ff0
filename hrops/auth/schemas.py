"""Auth Pydantic schemas for request / response validation."""


from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from hrops.users.schemas import UserBrief


# ── Requests ────────────────────────────────────────────────────────

class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class SignupRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=150)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    company_name: Optional[str] = Field(None, max_length=150)


class PasswordChangeRequest(BaseModel):
    old_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=8, max_length=128)


# ── Responses ───────────────────────────────────────────────────────

class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserBrief


class VerifyResponse(BaseModel):
    valid: bool = True
    user: UserBrief


class MessageResponse(BaseModel):
    message: str
