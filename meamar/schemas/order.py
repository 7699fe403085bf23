from typing import Any, Dict, List, Optional
from pydantic import Field, model_validator
from datetime import datetime
from decimal import Decimal
from meamar.models.order import OrderStatus
from meamar.schemas.base import CamelModel

class OrderItemCreate(CamelModel):
    product_id: str
    quantity: int = Field(ge=1)
    specifications: Optional[Dict[str, Any]] = None

class OrderItem(CamelModel):
    id: str
    order_id: str
    product_id: Optional[str] = None
    quantity: int
    unit_price: Optional[Decimal] = None
    total_price: Optional[Decimal] = None
    specifications: Optional[Dict[str, Any]] = None

class OrderBase(CamelModel):
    currency: str = "QAR"
    shipping_address: Optional[str] = None
    billing_address: Optional[str] = None
    notes: Optional[str] = None
    payment_method: Optional[str] = None

class OrderCreate(OrderBase):
    organization_id: Optional[str] = None
    rfq_response_id: Optional[str] = None
    # Ignored when items are given: the total is then the sum of the item snapshots
    total_amount: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    items: List[OrderItemCreate] = []

    @model_validator(mode="after")
    def check_source(self):
        if not self.organization_id and not self.rfq_response_id:
            raise ValueError("organizationId or rfqResponseId is required")
        return self

class OrderStatusUpdate(CamelModel):
    status: OrderStatus

class Order(OrderBase):
    id: str
    user_id: Optional[str] = None
    organization_id: Optional[str] = None
    rfq_response_id: Optional[str] = None
    order_number: str
    total_amount: Optional[Decimal] = None
    status: OrderStatus
    payment_reference: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class OrderDetail(Order):
    items: List[OrderItem] = []
