"""Generic pagination utilities for SQLAlchemy async queries."""


import math
from typing import Any, Generic, Iterable, Optional, Sequence, TypeVar

from fastapi import Query
from pydantic import BaseModel
from sqlalchemy import Select, func, inspect, select
from sqlalchemy.ext.asyncio import AsyncSession

from hrops.common.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from hrops.common.exceptions import InvalidInputException

T = TypeVar("T")


# ── FastAPI dependency ──────────────────────────────────────────────

class PaginationParams:
    """Inject via ``Depends(PaginationParams)`` on any list endpoint."""

    def __init__(
        self,
        page: int = Query(default=1, ge=1, description="Page number (1-indexed)"),
        page_size: int = Query(
            default=DEFAULT_PAGE_SIZE,
            ge=1,
            le=MAX_PAGE_SIZE,
            description=f"Items per page (max {MAX_PAGE_SIZE})",
        ),
        sort: Optional[str] = Query(
            default=None,
            description='Sort field; prefix "-" for DESC (e.g. "-date")',
        ),
    ) -> None:
        self.page = page
        self.page_size = page_size
        self.sort = sort

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


# ── Pydantic response models ───────────────────────────────────────

class PaginationMeta(BaseModel):
    """Metadata block embedded in every paginated response."""

    page: int
    page_size: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool


class PaginatedResponse(BaseModel, Generic[T]):
    """Standard envelope: ``{"data": [...], "meta": {...}}``."""

    data: Sequence[T]
    meta: PaginationMeta


# ── SQLAlchemy helpers ──────────────────────────────────────────────

def _sort_clause(model: Any, sort: str, sortable: Iterable[str]):
    descending = sort.startswith("-")
    col_name = sort.lstrip("-")
    allowed = sorted(sortable)
    columns = inspect(model).columns if model is not None else {}
    if col_name not in allowed or col_name not in columns:
        raise InvalidInputException(
            {"sort": [f"Cannot sort by '{col_name}'. Allowed: {', '.join(allowed) or 'none'}."]}
        )
    col = getattr(model, col_name)
    return col.desc() if descending else col.asc()


async def paginate(
    session: AsyncSession,
    query: Select,
    params: PaginationParams,
    *,
    model: Any = None,
    sortable: Iterable[str] = (),
) -> PaginatedResponse:
    """
    Execute *query* with LIMIT/OFFSET derived from *params* and return
    a ``PaginatedResponse`` with data + meta.

    ``params.sort`` must name one of *sortable*, each a mapped column of
    *model*; anything else is rejected with ``InvalidInputException``.
    Without a sort the query's own ordering is kept.
    """
    # ── sorting ─────────────────────────────────────────────────────
    if params.sort:
        query = query.order_by(None).order_by(
            _sort_clause(model, params.sort, sortable)
        )

    # ── total count (strip ORDER BY for efficiency) ─────────────────
    count_q = select(func.count()).select_from(query.order_by(None).subquery())
    total: int = (await session.execute(count_q)).scalar_one()

    # ── paginated rows ──────────────────────────────────────────────
    rows = (
        await session.execute(
            query.offset(params.offset).limit(params.page_size)
        )
    ).scalars().all()

    total_pages = math.ceil(total / params.page_size) if total else 0

    return PaginatedResponse(
        data=rows,
        meta=PaginationMeta(
            page=params.page,
            page_size=params.page_size,
            total=total,
            total_pages=total_pages,
            has_next=params.page < total_pages,
            has_prev=params.page > 1,
        ),
    )
