import asyncio
from typing import Callable, Optional, TypeVar
from fastapi import APIRouter, Depends, Query
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session, sessionmaker

from meamar.api import deps
from meamar.crud import base as crud_base
from meamar.crud import organization as crud_organization
from meamar.crud import product as crud_product
from meamar.crud import rfq as crud_rfq
from meamar.crud import user as crud_user
from meamar.models.organization import OrganizationStatus
from meamar.models.user import UserRole
from meamar.schemas.admin import AdminStats
from meamar.schemas.base import Page
from meamar.schemas.user import User

router = APIRouter()

T = TypeVar("T")

def _with_session(session_factory: sessionmaker, query: Callable[[Session], T]) -> T:
    db = session_factory()
    try:
        return query(db)
    finally:
        db.close()

@router.get("/users", response_model=Page[User])
def list_users(
    role: Optional[UserRole] = None,
    limit: int = Query(crud_base.DEFAULT_LIMIT, ge=1, le=100),
    offset: int = Query(0, ge=0),
    auth: deps.AuthContext = Depends(deps.require_admin),
    db: Session = Depends(deps.get_db),
):
    items, total = crud_user.list_users(db, role=role, limit=limit, offset=offset)
    return {"items": items, "total": total, "limit": limit, "offset": offset}

@router.get("/admin/stats", response_model=AdminStats)
async def admin_stats(
    auth: deps.AuthContext = Depends(deps.require_admin),
    session_factory: sessionmaker = Depends(deps.get_session_factory),
):
    """
    Dashboard figures. The four reads run concurrently, each on its own
    session; if any of them fails the whole request fails.
    """
    total_users, status_counts, total_products, total_rfqs = await asyncio.gather(
        run_in_threadpool(_with_session, session_factory, crud_user.count_users),
        run_in_threadpool(_with_session, session_factory, crud_organization.organization_status_counts),
        run_in_threadpool(_with_session, session_factory, crud_product.count_products),
        run_in_threadpool(_with_session, session_factory, crud_rfq.count_rfqs),
    )
    return AdminStats(
        total_users=total_users,
        total_vendors=sum(status_counts.values()),
        total_products=total_products,
        total_rfqs=total_rfqs,
        pending_approvals=status_counts.get(OrganizationStatus.PENDING, 0),
        active_vendors=status_counts.get(OrganizationStatus.ACTIVE, 0),
    )
