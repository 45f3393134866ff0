"""Auth router — signup, login, token verification, password change."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from hrops.auth.dependencies import get_current_user
from hrops.auth.schemas import (
    LoginRequest,
    MessageResponse,
    PasswordChangeRequest,
    SignupRequest,
    TokenResponse,
    VerifyResponse,
)
from hrops.auth import service as auth_service
from hrops.common.rate_limit import limiter
from hrops.config import settings
from hrops.database import get_db
from hrops.users.models import User
from hrops.users.schemas import UserBrief, UserOut

router = APIRouter(prefix="", tags=["auth"])


# ── POST /signup ────────────────────────────────────────────────────

@router.post("/signup", response_model=UserOut, status_code=201)
@limiter.limit(settings.LOGIN_RATE_LIMIT)
async def signup(
    body: SignupRequest,
    request: Request,
    db: AsyncSession = Depends(get_db),
):
    """Create an Admin account for a new organisation (public)."""
    return await auth_service.signup(
        db,
        name=body.name,
        email=body.email,
        password=body.password,
        company_name=body.company_name,
    )


# ── POST /login ─────────────────────────────────────────────────────

@router.post("/login", response_model=TokenResponse)
@limiter.limit(settings.LOGIN_RATE_LIMIT)
async def login(
    body: LoginRequest,
    request: Request,
    db: AsyncSession = Depends(get_db),
):
    user = await auth_service.authenticate(db, body.email, body.password)
    token, expires_in = auth_service.create_access_token(user)
    return TokenResponse(
        access_token=token,
        expires_in=expires_in,
        user=UserBrief.model_validate(user),
    )


# ── GET /verify ─────────────────────────────────────────────────────

@router.get("/verify", response_model=VerifyResponse)
async def verify(user: User = Depends(get_current_user)):
    return VerifyResponse(user=UserBrief.model_validate(user))


# ── GET /me ─────────────────────────────────────────────────────────

@router.get("/me", response_model=UserOut)
async def me(user: User = Depends(get_current_user)):
    return user


# ── POST /password ──────────────────────────────────────────────────

@router.post("/password", response_model=MessageResponse)
async def change_password(
    body: PasswordChangeRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await auth_service.change_password(db, user, body.old_password, body.new_password)
    return MessageResponse(message="Password changed successfully.")
