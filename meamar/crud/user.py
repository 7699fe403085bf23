from typing import List, Optional, Tuple
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session
from meamar.crud import base
from meamar.db.types import utcnow
from meamar.models.user import User, UserRole
from meamar.schemas.auth import TokenClaims

# Dialects with INSERT ... ON CONFLICT DO UPDATE
_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}

def get_user(db: Session, user_id: str) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()

def upsert_user_from_claims(db: Session, claims: TokenClaims, refresh_profile: bool = False) -> User:
    """Insert or refresh the user row behind an identity token in one statement.

    New rows take the whole profile from the claims. Existing rows only get
    their email refreshed, unless refresh_profile is set (a fresh login), in
    which case name and picture are synced too. Role is never touched.
    """
    now = utcnow()
    profile = {
        "first_name": claims.first_name,
        "last_name": claims.last_name,
        "profile_image_url": claims.profile_image_url,
    }
    refreshed = {"email": claims.email, "updated_at": now}
    if refresh_profile:
        refreshed.update(profile)

    insert = _UPSERT_INSERTS[db.get_bind().dialect.name]
    statement = (
        insert(User)
        .values(
            id=claims.sub,
            email=claims.email,
            role=UserRole.BUYER,
            preferred_language="en",
            created_at=now,
            updated_at=now,
            **profile,
        )
        .on_conflict_do_update(index_elements=[User.id], set_=refreshed)
    )
    db.execute(statement)
    db.commit()
    return get_user(db, claims.sub)

def update_user(db: Session, user: User, updates: dict) -> User:
    return base.update(db, user, updates)

def list_users(
    db: Session,
    *,
    role: Optional[UserRole] = None,
    limit: int = base.DEFAULT_LIMIT,
    offset: int = 0,
) -> Tuple[List[User], int]:
    query = db.query(User)
    if role:
        query = query.filter(User.role == role)
    query = query.order_by(User.created_at.desc())
    return base.paginate(query, limit, offset)

def count_users(db: Session) -> int:
    return db.query(User).count()
