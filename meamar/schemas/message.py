from datetime import datetime
from typing import List, Optional
from pydantic import Field
from meamar.models.message import MessageStatus
from meamar.schemas.base import CamelModel

class MessageCreate(CamelModel):
    recipient_id: str
    order_id: Optional[str] = None
    rfq_id: Optional[str] = None
    subject: Optional[str] = None
    content: str = Field(min_length=1)
    attachments: List[str] = []

class Message(MessageCreate):
    id: str
    sender_id: str
    attachments: Optional[List[str]] = None
    status: MessageStatus
    created_at: Optional[datetime] = None
    read_at: Optional[datetime] = None
