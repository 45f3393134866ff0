"""Auth dependencies — bearer token validation and actor resolution."""

from __future__ import annotations

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from hrops.auth.service import decode_access_token
from hrops.common.exceptions import UnauthenticatedException
from hrops.database import get_db
from hrops.rules.access import Actor
from hrops.users.models import User


def _extract_bearer(request: Request) -> str:
    """Extract Bearer token from Authorization header."""
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        raise UnauthenticatedException("Missing or invalid Authorization header.")
    return auth_header[7:]


# ── Core dependency ─────────────────────────────────────────────────

async def get_current_user(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> User:
    """Validate the JWT and return the authenticated User.

    The role comes from the users table, not the token, so a role change
    applies to tokens issued before it.
    """
    token = _extract_bearer(request)
    payload = decode_access_token(token)

    user = await db.get(User, payload["sub"])
    if user is None:
        raise UnauthenticatedException("User account not found.")
    return user


async def get_actor(user: User = Depends(get_current_user)) -> Actor:
    """The authenticated caller as seen by the access policy."""
    return Actor(id=user.id, email=user.email, role=user.parsed_role)
