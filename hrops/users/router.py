"""Users router — list, create, change role."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from hrops.auth.dependencies import get_actor
from hrops.common.pagination import PaginationParams
from hrops.database import get_db
from hrops.rules.access import Actor
from hrops.users.schemas import RoleChangeRequest, UserCreate, UserListResponse, UserOut
from hrops.users.service import UserService

router = APIRouter(prefix="", tags=["users"])


# ── GET / ───────────────────────────────────────────────────────────

@router.get("", response_model=UserListResponse)
async def list_users(
    department: Optional[str] = Query(None),
    params: PaginationParams = Depends(),
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    """Employees get their own profile; privileged roles get everyone."""
    page = await UserService.list_users(db, actor, params, department=department)
    return UserListResponse(
        data=[UserOut.model_validate(u) for u in page.data],
        meta=page.meta,
    )


# ── POST / ──────────────────────────────────────────────────────────

@router.post("", response_model=UserOut, status_code=201)
async def create_user(
    body: UserCreate,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    return await UserService.create_user(db, actor, body)


# ── PATCH /{user_id}/role ───────────────────────────────────────────

@router.patch("/{user_id}/role", response_model=UserOut)
async def change_role(
    user_id: int,
    body: RoleChangeRequest,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    """Change a user's role (Admin only)."""
    return await UserService.change_role(db, actor, user_id, body.role)
