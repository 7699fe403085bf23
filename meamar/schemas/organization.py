from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import EmailStr, Field, field_validator
from meamar.models.organization import OrganizationStatus
from meamar.schemas.base import CamelModel

class OrganizationBase(CamelModel):
    trade_name: Optional[str] = None
    description: Optional[str] = None
    logo_url: Optional[str] = None
    commercial_registration: Optional[str] = None
    tax_number: Optional[str] = None
    website: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[EmailStr] = None
    address: Optional[str] = None
    city: Optional[str] = None
    categories: List[str] = []

class OrganizationCreate(OrganizationBase):
    legal_name: str = Field(min_length=1)

class OrganizationUpdate(CamelModel):
    legal_name: Optional[str] = Field(default=None, min_length=1)
    trade_name: Optional[str] = None
    description: Optional[str] = None
    logo_url: Optional[str] = None
    commercial_registration: Optional[str] = None
    tax_number: Optional[str] = None
    website: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[EmailStr] = None
    address: Optional[str] = None
    city: Optional[str] = None
    categories: Optional[List[str]] = None
    # Admin only
    status: Optional[OrganizationStatus] = None

    @field_validator("legal_name")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("may be omitted but not null")
        return v

class Organization(OrganizationBase):
    id: str
    user_id: Optional[str] = None
    legal_name: str
    email: Optional[str] = None
    categories: Optional[List[str]] = None
    status: OrganizationStatus
    rating: Optional[Decimal] = None
    review_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
