from sqlalchemy import Column, String, Text, Integer, Boolean, ForeignKey, DateTime
from sqlalchemy.orm import relationship
from meamar.db.session import Base
from meamar.db.types import generate_id, utcnow

class Review(Base):
    __tablename__ = "reviews"

    id = Column(String, primary_key=True, default=generate_id)
    user_id = Column(String, ForeignKey("users.id"), index=True)
    organization_id = Column(String, ForeignKey("organizations.id"), index=True)
    product_id = Column(String, ForeignKey("products.id"), index=True)
    order_id = Column(String, ForeignKey("orders.id"))
    rating = Column(Integer, nullable=False)
    title = Column(String)
    comment = Column(Text)
    is_verified = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    user = relationship("User", back_populates="reviews")
    organization = relationship("Organization")
    product = relationship("Product")
