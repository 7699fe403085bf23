from sqlalchemy import Column, String, Text, Integer, Boolean, ForeignKey, DateTime
from sqlalchemy.orm import relationship
from meamar.db.session import Base
from meamar.db.types import generate_id, utcnow

class Category(Base):
    __tablename__ = "categories"

    id = Column(String, primary_key=True, default=generate_id)
    name = Column(String, nullable=False, index=True)
    name_ar = Column(String)
    description = Column(Text)
    description_ar = Column(Text)
    icon_url = Column(String)
    parent_id = Column(String, ForeignKey("categories.id"), nullable=True, index=True)
    is_active = Column(Boolean, default=True, nullable=False)
    sort_order = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    # Define relationships
    parent = relationship("Category", remote_side=[id], backref="children")
    products = relationship("Product", back_populates="category")
