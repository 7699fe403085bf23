from decimal import Decimal
from typing import List, Optional, Tuple
from sqlalchemy import func
from sqlalchemy.orm import Session
from meamar.crud import base
from meamar.models.organization import Organization
from meamar.models.product import Product
from meamar.models.review import Review

def list_reviews(
    db: Session,
    *,
    organization_id: Optional[str] = None,
    product_id: Optional[str] = None,
    user_id: Optional[str] = None,
    limit: int = base.DEFAULT_LIMIT,
    offset: int = 0,
) -> Tuple[List[Review], int]:
    query = db.query(Review)
    if organization_id:
        query = query.filter(Review.organization_id == organization_id)
    if product_id:
        query = query.filter(Review.product_id == product_id)
    if user_id:
        query = query.filter(Review.user_id == user_id)
    query = query.order_by(Review.created_at.desc())
    return base.paginate(query, limit, offset)

def _refresh_rating(db: Session, target, column) -> None:
    average, count = (
        db.query(func.avg(Review.rating), func.count(Review.id))
        .filter(column == target.id)
        .one()
    )
    target.rating = Decimal(str(average)).quantize(Decimal("0.01")) if average is not None else None
    target.review_count = count

def create_review(
    db: Session,
    data: dict,
    user_id: str,
    is_verified: bool,
    organization: Optional[Organization] = None,
    product: Optional[Product] = None,
) -> Review:
    """Insert the review and recompute the reviewed entities' rating and
    review_count in the same commit."""
    db_review = Review(**data, user_id=user_id, is_verified=is_verified)
    db.add(db_review)
    db.flush()

    if organization is not None:
        _refresh_rating(db, organization, Review.organization_id)
    if product is not None:
        _refresh_rating(db, product, Review.product_id)

    db.commit()
    db.refresh(db_review)
    return db_review
