from sqlalchemy import Column, String, Text, Numeric, Boolean, ForeignKey, DateTime
from sqlalchemy.orm import relationship
import enum
from meamar.db.session import Base
from meamar.db.types import JSONType, enum_type, generate_id, utcnow

class RfqStatus(str, enum.Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    CLOSED = "closed"
    CANCELLED = "cancelled"

class Rfq(Base):
    __tablename__ = "rfqs"

    id = Column(String, primary_key=True, default=generate_id)
    user_id = Column(String, ForeignKey("users.id"), index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    category_id = Column(String, ForeignKey("categories.id"), index=True)
    project_type = Column(String)
    budget_min = Column(Numeric(10, 2))
    budget_max = Column(Numeric(10, 2))
    currency = Column(String, default="QAR", nullable=False)
    deadline = Column(DateTime(timezone=True))
    attachments = Column(JSONType, default=list)
    status = Column(enum_type(RfqStatus, "rfq_status"), default=RfqStatus.DRAFT, nullable=False)
    requirements = Column(JSONType)
    location = Column(String)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    user = relationship("User", back_populates="rfqs")
    responses = relationship("RfqResponse", back_populates="rfq", cascade="all, delete-orphan")

class RfqResponse(Base):
    __tablename__ = "rfq_responses"

    id = Column(String, primary_key=True, default=generate_id)
    rfq_id = Column(String, ForeignKey("rfqs.id"), index=True)
    organization_id = Column(String, ForeignKey("organizations.id"), index=True)
    price = Column(Numeric(10, 2))
    currency = Column(String, default="QAR", nullable=False)
    delivery_time = Column(String)
    description = Column(Text)
    attachments = Column(JSONType, default=list)
    valid_until = Column(DateTime(timezone=True))
    # None = pending, True = accepted, False = rejected
    is_accepted = Column(Boolean, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    rfq = relationship("Rfq", back_populates="responses")
    organization = relationship("Organization", back_populates="rfq_responses")
