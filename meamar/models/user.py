from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import relationship
import enum
from meamar.db.session import Base
from meamar.db.types import enum_type, generate_id, utcnow

class UserRole(str, enum.Enum):
    BUYER = "buyer"
    VENDOR = "vendor"
    ADMIN = "admin"

class User(Base):
    __tablename__ = "users"

    id = Column(String, primary_key=True, default=generate_id)
    email = Column(String, unique=True, index=True, nullable=True)
    first_name = Column(String)
    last_name = Column(String)
    profile_image_url = Column(String)
    role = Column(enum_type(UserRole, "user_role"), default=UserRole.BUYER, nullable=False)
    phone = Column(String)
    preferred_language = Column(String, default="en")
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    # Relationships
    organizations = relationship("Organization", back_populates="user")
    rfqs = relationship("Rfq", back_populates="user")
    orders = relationship("Order", back_populates="user")
    reviews = relationship("Review", back_populates="user")
