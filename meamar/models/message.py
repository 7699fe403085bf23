from sqlalchemy import Column, String, Text, ForeignKey, DateTime
from sqlalchemy.orm import relationship
import enum
from meamar.db.session import Base
from meamar.db.types import JSONType, enum_type, generate_id, utcnow

class MessageStatus(str, enum.Enum):
    SENT = "sent"
    # Never set by the API: there is no delivery acknowledgement channel
    DELIVERED = "delivered"
    READ = "read"

class Message(Base):
    __tablename__ = "messages"

    id = Column(String, primary_key=True, default=generate_id)
    sender_id = Column(String, ForeignKey("users.id"), index=True)
    recipient_id = Column(String, ForeignKey("users.id"), index=True)
    order_id = Column(String, ForeignKey("orders.id"))
    rfq_id = Column(String, ForeignKey("rfqs.id"))
    subject = Column(String)
    content = Column(Text, nullable=False)
    attachments = Column(JSONType, default=list)
    status = Column(enum_type(MessageStatus, "message_status"), default=MessageStatus.SENT, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    read_at = Column(DateTime(timezone=True))

    sender = relationship("User", foreign_keys=[sender_id])
    recipient = relationship("User", foreign_keys=[recipient_id])
