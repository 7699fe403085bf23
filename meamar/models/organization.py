from sqlalchemy import Column, String, Text, Integer, Numeric, ForeignKey, DateTime
from sqlalchemy.orm import relationship
import enum
from meamar.db.session import Base
from meamar.db.types import JSONType, enum_type, generate_id, utcnow

class OrganizationStatus(str, enum.Enum):
    PENDING = "pending"
    ACTIVE = "active"
    SUSPENDED = "suspended"
    REJECTED = "rejected"

class Organization(Base):
    __tablename__ = "organizations"

    id = Column(String, primary_key=True, default=generate_id)
    user_id = Column(String, ForeignKey("users.id"), index=True)
    legal_name = Column(String, nullable=False)
    trade_name = Column(String)
    description = Column(Text)
    logo_url = Column(String)
    commercial_registration = Column(String)
    tax_number = Column(String)
    website = Column(String)
    phone = Column(String)
    email = Column(String)
    address = Column(Text)
    city = Column(String)
    status = Column(
        enum_type(OrganizationStatus, "organization_status"),
        default=OrganizationStatus.PENDING,
        nullable=False,
    )
    # Maintained on review creation, see crud.review
    rating = Column(Numeric(3, 2))
    review_count = Column(Integer, default=0, nullable=False)
    categories = Column(JSONType, default=list)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    user = relationship("User", back_populates="organizations")
    products = relationship("Product", back_populates="organization")
    rfq_responses = relationship("RfqResponse", back_populates="organization")
    orders = relationship("Order", back_populates="organization")
