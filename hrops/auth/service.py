"""Auth service — password hashing, JWT issuance, login, signup."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from jose import ExpiredSignatureError, JWTError, jwt
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from werkzeug.security import check_password_hash, generate_password_hash

from hrops.common.audit import create_audit_entry
from hrops.common.constants import PredefinedRole
from hrops.common.exceptions import (
    ConflictError,
    ForbiddenException,
    NotFoundException,
    UnauthenticatedException,
)
from hrops.config import settings
from hrops.users.models import User

logger = logging.getLogger(__name__)

_BAD_CREDENTIALS = "Invalid email or password."


# ── Passwords ───────────────────────────────────────────────────────

def hash_password(password: str) -> str:
    return generate_password_hash(password)


def verify_password(password_hash: str, password: str) -> bool:
    return check_password_hash(password_hash, password)


# ── JWT helpers ─────────────────────────────────────────────────────

def create_access_token(user: User) -> tuple[str, int]:
    """Return (encoded_jwt, expires_in_seconds)."""
    expires_in = settings.JWT_EXPIRY_HOURS * 3600
    payload = {
        "sub": str(user.id),
        "email": user.email,
        "role": user.role,
        "type": "access",
        "exp": datetime.now(timezone.utc) + timedelta(hours=settings.JWT_EXPIRY_HOURS),
    }
    token = jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)
    return token, expires_in


def decode_access_token(token: str) -> dict[str, Any]:
    """Decode and validate an access token, or raise 401."""
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
        )
    except ExpiredSignatureError:
        raise UnauthenticatedException("Token has expired.")
    except JWTError:
        raise UnauthenticatedException("Invalid token.")

    if payload.get("type") != "access":
        raise UnauthenticatedException("Invalid token type.")
    try:
        payload["sub"] = int(payload["sub"])
    except (KeyError, TypeError, ValueError):
        raise UnauthenticatedException("Invalid token subject.")
    return payload


# ── Lookups ─────────────────────────────────────────────────────────

async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.email == email.lower()))
    return result.scalars().first()


async def get_user(db: AsyncSession, user_id: int) -> User:
    """Return a user by id, or raise 404."""
    user = await db.get(User, user_id)
    if user is None:
        raise NotFoundException(entity_type="User", entity_id=user_id)
    return user


# ── Login / signup / password ───────────────────────────────────────

async def authenticate(db: AsyncSession, email: str, password: str) -> User:
    """Return the user for valid credentials; the same 401 for any mismatch."""
    user = await get_user_by_email(db, email)
    if user is None or not verify_password(user.password_hash, password):
        logger.warning("Failed login for %s", email.lower())
        raise UnauthenticatedException(_BAD_CREDENTIALS)
    return user


async def signup(
    db: AsyncSession,
    *,
    name: str,
    email: str,
    password: str,
    company_name: Optional[str] = None,
) -> User:
    """Register a new organisation owner. Signup always creates an Admin."""
    if not settings.ALLOW_SIGNUP:
        raise ForbiddenException(detail="Self-signup is disabled.")

    email = email.lower()
    if await get_user_by_email(db, email) is not None:
        raise ConflictError("email", email)

    user = User(
        name=name,
        email=email,
        password_hash=hash_password(password),
        role=PredefinedRole.admin.value,
        department=company_name or None,
    )
    db.add(user)
    try:
        await db.flush()
    except IntegrityError as exc:
        raise ConflictError("email", email) from exc

    await create_audit_entry(
        db,
        action="signup",
        entity_type="user",
        entity_id=user.id,
        actor_id=user.id,
        new_values={"email": email, "role": user.role},
    )
    logger.info("Signup created admin user %s", user.id)
    return user


async def change_password(
    db: AsyncSession,
    user: User,
    old_password: str,
    new_password: str,
) -> None:
    if not verify_password(user.password_hash, old_password):
        raise UnauthenticatedException("Old password is incorrect.")
    user.password_hash = hash_password(new_password)
    await db.flush()
    logger.info("User %s changed password", user.id)
