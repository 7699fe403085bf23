from typing import List, Optional, Tuple
from sqlalchemy.orm import Session
from meamar.crud import base
from meamar.models.rfq import Rfq, RfqResponse, RfqStatus

def list_rfqs(
    db: Session,
    *,
    user_id: Optional[str] = None,
    status: Optional[RfqStatus] = None,
    category_id: Optional[str] = None,
    limit: int = base.DEFAULT_LIMIT,
    offset: int = 0,
) -> Tuple[List[Rfq], int]:
    query = db.query(Rfq)
    if user_id:
        query = query.filter(Rfq.user_id == user_id)
    if status:
        query = query.filter(Rfq.status == status)
    if category_id:
        query = query.filter(Rfq.category_id == category_id)
    query = query.order_by(Rfq.created_at.desc())
    return base.paginate(query, limit, offset)

def get_rfq(db: Session, rfq_id: str) -> Optional[Rfq]:
    return db.query(Rfq).filter(Rfq.id == rfq_id).first()

def create_rfq(db: Session, data: dict, user_id: str) -> Rfq:
    return base.create(db, Rfq(**data, user_id=user_id))

def update_rfq(db: Session, rfq: Rfq, updates: dict) -> Rfq:
    return base.update(db, rfq, updates)

def count_rfqs(db: Session) -> int:
    return db.query(Rfq).count()

def list_rfq_responses(
    db: Session,
    rfq_id: str,
    *,
    limit: int = base.DEFAULT_LIMIT,
    offset: int = 0,
) -> Tuple[List[RfqResponse], int]:
    # Cheapest quote first, quotes without a price last
    query = (
        db.query(RfqResponse)
        .filter(RfqResponse.rfq_id == rfq_id)
        .order_by(RfqResponse.price.is_(None), RfqResponse.price.asc(), RfqResponse.created_at.asc())
    )
    return base.paginate(query, limit, offset)

def get_rfq_response(db: Session, response_id: str) -> Optional[RfqResponse]:
    return db.query(RfqResponse).filter(RfqResponse.id == response_id).first()

def get_accepted_response(db: Session, rfq_id: str) -> Optional[RfqResponse]:
    return (
        db.query(RfqResponse)
        .filter(RfqResponse.rfq_id == rfq_id, RfqResponse.is_accepted.is_(True))
        .first()
    )

def create_rfq_response(db: Session, data: dict, rfq_id: str, organization_id: str) -> RfqResponse:
    db_response = RfqResponse(**data, rfq_id=rfq_id, organization_id=organization_id, is_accepted=None)
    return base.create(db, db_response)

def update_rfq_response(db: Session, response: RfqResponse, updates: dict) -> RfqResponse:
    return base.update(db, response, updates)
