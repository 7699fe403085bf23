from sqlalchemy import Column, String, Text, Integer, Numeric, ForeignKey, DateTime
from sqlalchemy.orm import relationship
import enum
from meamar.db.session import Base
from meamar.db.types import JSONType, enum_type, generate_id, utcnow

class OrderStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"

class Order(Base):
    __tablename__ = "orders"

    id = Column(String, primary_key=True, default=generate_id)
    user_id = Column(String, ForeignKey("users.id"), index=True)
    organization_id = Column(String, ForeignKey("organizations.id"), index=True)
    rfq_response_id = Column(String, ForeignKey("rfq_responses.id"))
    order_number = Column(String, unique=True, index=True, nullable=False)
    total_amount = Column(Numeric(10, 2))
    currency = Column(String, default="QAR", nullable=False)
    status = Column(enum_type(OrderStatus, "order_status"), default=OrderStatus.PENDING, nullable=False)
    shipping_address = Column(Text)
    billing_address = Column(Text)
    notes = Column(Text)
    payment_method = Column(String)
    payment_reference = Column(String)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    user = relationship("User", back_populates="orders")
    organization = relationship("Organization", back_populates="orders")
    items = relationship("OrderItem", back_populates="order", cascade="all, delete-orphan")

class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(String, primary_key=True, default=generate_id)
    order_id = Column(String, ForeignKey("orders.id"), index=True)
    product_id = Column(String, ForeignKey("products.id"))
    quantity = Column(Integer, nullable=False)
    # Snapshot of the product price when the order was placed
    unit_price = Column(Numeric(10, 2))
    total_price = Column(Numeric(10, 2))
    specifications = Column(JSONType)

    order = relationship("Order", back_populates="items")
    product = relationship("Product")
