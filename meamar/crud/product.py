from typing import List, Optional, Tuple
from sqlalchemy import or_
from sqlalchemy.orm import Session
from meamar.crud import base
from meamar.models.product import Product

def list_products(
    db: Session,
    *,
    organization_id: Optional[str] = None,
    category_id: Optional[str] = None,
    search: Optional[str] = None,
    is_active: Optional[bool] = None,
    limit: int = base.DEFAULT_LIMIT,
    offset: int = 0,
) -> Tuple[List[Product], int]:
    query = db.query(Product)

    if organization_id:
        query = query.filter(Product.organization_id == organization_id)
    if category_id:
        query = query.filter(Product.category_id == category_id)
    if search:
        pattern = f"%{search}%"
        query = query.filter(
            or_(
                Product.name.ilike(pattern),
                Product.name_ar.ilike(pattern),
                Product.description.ilike(pattern),
            )
        )
    if is_active is not None:
        query = query.filter(Product.is_active.is_(is_active))

    query = query.order_by(
        Product.rating.is_(None),
        Product.rating.desc(),
        Product.created_at.desc(),
    )
    return base.paginate(query, limit, offset)

def get_product(db: Session, product_id: str) -> Optional[Product]:
    return db.query(Product).filter(Product.id == product_id).first()

def create_product(db: Session, data: dict) -> Product:
    return base.create(db, Product(**data, rating=None, review_count=0))

def update_product(db: Session, product: Product, updates: dict) -> Product:
    return base.update(db, product, updates)

def count_products(db: Session, is_active: bool = True) -> int:
    return db.query(Product).filter(Product.is_active.is_(is_active)).count()
