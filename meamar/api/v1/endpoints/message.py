from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from meamar.api import deps
from meamar.crud import base as crud_base
from meamar.crud import message as crud_message
from meamar.crud import order as crud_order
from meamar.crud import rfq as crud_rfq
from meamar.crud import user as crud_user
from meamar.schemas.base import Page
from meamar.schemas.message import Message, MessageCreate

router = APIRouter()

MESSAGE_NOT_FOUND = "Message not found"
RECIPIENT_NOT_FOUND = "Recipient not found"
ORDER_NOT_FOUND = "Order not found"
RFQ_NOT_FOUND = "RFQ not found"
NOT_RECIPIENT = "Only the recipient can mark a message as read"

@router.get("", response_model=Page[Message])
def list_messages(
    order_id: Optional[str] = Query(None, alias="orderId"),
    rfq_id: Optional[str] = Query(None, alias="rfqId"),
    limit: int = Query(crud_base.DEFAULT_LIMIT, ge=1, le=100),
    offset: int = Query(0, ge=0),
    auth: deps.AuthContext = Depends(deps.require_auth),
    db: Session = Depends(deps.get_db),
):
    """
    Messages the caller sent or received, newest first
    """
    items, total = crud_message.list_messages(
        db, user_id=auth.user_id, order_id=order_id, rfq_id=rfq_id, limit=limit, offset=offset
    )
    return {"items": items, "total": total, "limit": limit, "offset": offset}

@router.post("", response_model=Message, status_code=status.HTTP_201_CREATED)
def send_message(
    message_in: MessageCreate,
    auth: deps.AuthContext = Depends(deps.require_auth),
    db: Session = Depends(deps.get_db),
):
    if not crud_user.get_user(db, message_in.recipient_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=RECIPIENT_NOT_FOUND)
    if message_in.order_id and not crud_order.get_order(db, message_in.order_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=ORDER_NOT_FOUND)
    if message_in.rfq_id and not crud_rfq.get_rfq(db, message_in.rfq_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=RFQ_NOT_FOUND)
    return crud_message.create_message(db, message_in.model_dump(), auth.user_id)

@router.put("/{message_id}/read", response_model=Message)
def mark_message_read(
    message_id: str,
    auth: deps.AuthContext = Depends(deps.require_auth),
    db: Session = Depends(deps.get_db),
):
    message = crud_message.get_message(db, message_id)
    if not message:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=MESSAGE_NOT_FOUND)
    if message.recipient_id != auth.user_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=NOT_RECIPIENT)
    return crud_message.mark_message_read(db, message)
