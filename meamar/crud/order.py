import secrets
import string
import time
from decimal import Decimal
from typing import List, Optional, Tuple
from sqlalchemy.orm import Session
from meamar.crud import base
from meamar.models.order import Order, OrderItem, OrderStatus

ORDER_NUMBER_ALPHABET = string.ascii_uppercase + string.digits

def generate_order_number() -> str:
    """ORD-<epoch millis>-<5 uppercase alphanumerics>"""
    suffix = "".join(secrets.choice(ORDER_NUMBER_ALPHABET) for _ in range(5))
    return f"ORD-{int(time.time() * 1000)}-{suffix}"

def list_orders(
    db: Session,
    *,
    user_id: Optional[str] = None,
    organization_id: Optional[str] = None,
    status: Optional[OrderStatus] = None,
    limit: int = base.DEFAULT_LIMIT,
    offset: int = 0,
) -> Tuple[List[Order], int]:
    query = db.query(Order)
    if user_id:
        query = query.filter(Order.user_id == user_id)
    if organization_id:
        query = query.filter(Order.organization_id == organization_id)
    if status:
        query = query.filter(Order.status == status)
    query = query.order_by(Order.created_at.desc())
    return base.paginate(query, limit, offset)

def get_order(db: Session, order_id: str) -> Optional[Order]:
    return db.query(Order).filter(Order.id == order_id).first()

def get_order_items(db: Session, order_id: str) -> List[OrderItem]:
    return db.query(OrderItem).filter(OrderItem.order_id == order_id).all()

def create_order(db: Session, data: dict, items: List[dict], user_id: str) -> Order:
    """Create the order and its item snapshots in one commit.

    ``items`` carry product_id, quantity, unit_price and specifications; when
    present, total_amount is the sum of their line totals.
    """
    db_order = Order(
        **data,
        user_id=user_id,
        order_number=generate_order_number(),
        status=OrderStatus.PENDING,
    )

    if items:
        total = Decimal("0")
        for item in items:
            line_total = item["unit_price"] * item["quantity"]
            db_order.items.append(OrderItem(**item, total_price=line_total))
            total += line_total
        db_order.total_amount = total

    return base.create(db, db_order)

def update_order(db: Session, order: Order, updates: dict) -> Order:
    return base.update(db, order, updates)
