from typing import Dict, List, Optional, Tuple
from sqlalchemy import func, or_
from sqlalchemy.orm import Session
from meamar.crud import base
from meamar.models.organization import Organization, OrganizationStatus

def list_organizations(
    db: Session,
    *,
    status: Optional[OrganizationStatus] = None,
    search: Optional[str] = None,
    user_id: Optional[str] = None,
    limit: int = base.DEFAULT_LIMIT,
    offset: int = 0,
) -> Tuple[List[Organization], int]:
    query = db.query(Organization)

    if status:
        query = query.filter(Organization.status == status)
    if user_id:
        query = query.filter(Organization.user_id == user_id)
    if search:
        pattern = f"%{search}%"
        query = query.filter(
            or_(
                Organization.legal_name.ilike(pattern),
                Organization.trade_name.ilike(pattern),
                Organization.description.ilike(pattern),
            )
        )

    # Best rated first, unrated last
    query = query.order_by(
        Organization.rating.is_(None),
        Organization.rating.desc(),
        Organization.created_at.desc(),
    )
    return base.paginate(query, limit, offset)

def get_organization(db: Session, organization_id: str) -> Optional[Organization]:
    return db.query(Organization).filter(Organization.id == organization_id).first()

def get_user_organization(db: Session, user_id: str) -> Optional[Organization]:
    """The vendor profile a user administers (one per user in practice)"""
    return (
        db.query(Organization)
        .filter(Organization.user_id == user_id)
        .order_by(Organization.created_at.asc())
        .first()
    )

def create_organization(db: Session, data: dict, user_id: str) -> Organization:
    db_org = Organization(
        **data,
        user_id=user_id,
        status=OrganizationStatus.PENDING,
        rating=None,
        review_count=0,
    )
    return base.create(db, db_org)

def update_organization(db: Session, organization: Organization, updates: dict) -> Organization:
    return base.update(db, organization, updates)

def organization_status_counts(db: Session) -> Dict[OrganizationStatus, int]:
    rows = (
        db.query(Organization.status, func.count(Organization.id))
        .group_by(Organization.status)
        .all()
    )
    return {status: count for status, count in rows}
