from sqlalchemy import Column, String, Text, Integer, Numeric, Boolean, ForeignKey, DateTime
from sqlalchemy.orm import relationship
from meamar.db.session import Base
from meamar.db.types import JSONType, generate_id, utcnow

class Product(Base):
    __tablename__ = "products"

    id = Column(String, primary_key=True, default=generate_id)
    organization_id = Column(String, ForeignKey("organizations.id"), index=True)
    category_id = Column(String, ForeignKey("categories.id"), index=True)
    name = Column(String, nullable=False, index=True)
    name_ar = Column(String)
    description = Column(Text)
    description_ar = Column(Text)
    sku = Column(String)
    # NULL price means "contact for price"
    price = Column(Numeric(10, 2))
    currency = Column(String, default="QAR", nullable=False)
    images = Column(JSONType, default=list)
    specifications = Column(JSONType)
    stock_quantity = Column(Integer)
    min_order_quantity = Column(Integer, default=1, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    rating = Column(Numeric(3, 2))
    review_count = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    organization = relationship("Organization", back_populates="products")
    category = relationship("Category", back_populates="products")
