from typing import List, Optional, Tuple
from sqlalchemy import or_
from sqlalchemy.orm import Session
from meamar.crud import base
from meamar.db.types import utcnow
from meamar.models.message import Message, MessageStatus

def list_messages(
    db: Session,
    *,
    user_id: Optional[str] = None,
    order_id: Optional[str] = None,
    rfq_id: Optional[str] = None,
    limit: int = base.DEFAULT_LIMIT,
    offset: int = 0,
) -> Tuple[List[Message], int]:
    """Messages user_id sent or received; conversations are grouped by the client"""
    query = db.query(Message)
    if user_id:
        query = query.filter(or_(Message.sender_id == user_id, Message.recipient_id == user_id))
    if order_id:
        query = query.filter(Message.order_id == order_id)
    if rfq_id:
        query = query.filter(Message.rfq_id == rfq_id)
    query = query.order_by(Message.created_at.desc())
    return base.paginate(query, limit, offset)

def get_message(db: Session, message_id: str) -> Optional[Message]:
    return db.query(Message).filter(Message.id == message_id).first()

def create_message(db: Session, data: dict, sender_id: str) -> Message:
    return base.create(db, Message(**data, sender_id=sender_id, status=MessageStatus.SENT))

def mark_message_read(db: Session, message: Message) -> Message:
    # read_at is re-stamped on every call, including repeats
    return base.update(db, message, {"status": MessageStatus.READ, "read_at": utcnow()})
