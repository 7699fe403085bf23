from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional
from pydantic import Field, field_validator
from meamar.schemas.base import CamelModel

class ProductBase(CamelModel):
    category_id: Optional[str] = None
    name: str = Field(min_length=1)
    name_ar: Optional[str] = None
    description: Optional[str] = None
    description_ar: Optional[str] = None
    sku: Optional[str] = None
    price: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    currency: str = "QAR"
    images: List[str] = []
    specifications: Optional[Dict[str, Any]] = None
    stock_quantity: Optional[int] = Field(default=None, ge=0)
    min_order_quantity: int = Field(default=1, ge=1)
    is_active: bool = True

class ProductCreate(ProductBase):
    organization_id: str

class ProductUpdate(CamelModel):
    category_id: Optional[str] = None
    name: Optional[str] = Field(default=None, min_length=1)
    name_ar: Optional[str] = None
    description: Optional[str] = None
    description_ar: Optional[str] = None
    sku: Optional[str] = None
    price: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    currency: Optional[str] = None
    images: Optional[List[str]] = None
    specifications: Optional[Dict[str, Any]] = None
    stock_quantity: Optional[int] = Field(default=None, ge=0)
    min_order_quantity: Optional[int] = Field(default=None, ge=1)
    is_active: Optional[bool] = None

    @field_validator("name", "currency", "min_order_quantity", "is_active")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("may be omitted but not null")
        return v

class Product(ProductBase):
    id: str
    organization_id: Optional[str] = None
    images: Optional[List[str]] = None
    rating: Optional[Decimal] = None
    review_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
