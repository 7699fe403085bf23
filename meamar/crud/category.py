from typing import List, Optional, Tuple
from sqlalchemy.orm import Session
from meamar.crud import base
from meamar.models.category import Category

def list_categories(
    db: Session,
    *,
    parent_id: Optional[str] = None,
    limit: int = base.DEFAULT_LIMIT,
    offset: int = 0,
) -> Tuple[List[Category], int]:
    """Active categories under parent_id, or the top level when it is None"""
    query = db.query(Category).filter(Category.is_active.is_(True))
    if parent_id:
        query = query.filter(Category.parent_id == parent_id)
    else:
        query = query.filter(Category.parent_id.is_(None))
    query = query.order_by(Category.sort_order.asc(), Category.name.asc())
    return base.paginate(query, limit, offset)

def get_category(db: Session, category_id: str) -> Optional[Category]:
    return db.query(Category).filter(Category.id == category_id).first()

def create_category(db: Session, data: dict) -> Category:
    return base.create(db, Category(**data))
