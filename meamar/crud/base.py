"""Helpers shared by the per-entity storage modules.

Every storage call is a single statement or a single commit. List helpers
return ``(items, total)`` where ``total`` counts the filtered rows before
LIMIT/OFFSET is applied.
"""

from typing import Any, Dict, List, Tuple, TypeVar
from sqlalchemy.orm import Query, Session
from meamar.db.types import utcnow

ModelType = TypeVar("ModelType")

DEFAULT_LIMIT = 20

def paginate(query: Query, limit: int = DEFAULT_LIMIT, offset: int = 0) -> Tuple[List[Any], int]:
    # count() before order_by/limit so the COUNT query stays cheap
    total = query.order_by(None).count()
    items = query.offset(offset).limit(limit).all()
    return items, total

def create(db: Session, db_obj: ModelType) -> ModelType:
    db.add(db_obj)
    db.commit()
    db.refresh(db_obj)
    return db_obj

def update(db: Session, db_obj: ModelType, updates: Dict[str, Any]) -> ModelType:
    for key, value in updates.items():
        setattr(db_obj, key, value)
    if hasattr(db_obj, "updated_at"):
        db_obj.updated_at = utcnow()
    db.commit()
    db.refresh(db_obj)
    return db_obj
