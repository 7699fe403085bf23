from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional
from pydantic import Field, field_validator, model_validator
from meamar.models.rfq import RfqStatus
from meamar.schemas.base import CamelModel

class RfqBase(CamelModel):
    category_id: Optional[str] = None
    project_type: Optional[str] = None
    budget_min: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    budget_max: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    currency: str = "QAR"
    deadline: Optional[datetime] = None
    attachments: List[str] = []
    requirements: Optional[Dict[str, Any]] = None
    location: Optional[str] = None

    @model_validator(mode="after")
    def check_budget_range(self):
        if self.budget_min is not None and self.budget_max is not None and self.budget_min > self.budget_max:
            raise ValueError("budgetMin must not exceed budgetMax")
        return self

class RfqCreate(RfqBase):
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    status: RfqStatus = RfqStatus.DRAFT

    @field_validator("status")
    @classmethod
    def initial_status(cls, v: RfqStatus) -> RfqStatus:
        if v not in (RfqStatus.DRAFT, RfqStatus.PUBLISHED):
            raise ValueError("a new RFQ must be draft or published")
        return v

class RfqUpdate(CamelModel):
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = Field(default=None, min_length=1)
    category_id: Optional[str] = None
    project_type: Optional[str] = None
    budget_min: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    budget_max: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    currency: Optional[str] = None
    deadline: Optional[datetime] = None
    attachments: Optional[List[str]] = None
    requirements: Optional[Dict[str, Any]] = None
    location: Optional[str] = None
    status: Optional[RfqStatus] = None

    @field_validator("title", "description", "currency")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("may be omitted but not null")
        return v

class Rfq(RfqBase):
    id: str
    user_id: Optional[str] = None
    title: str
    description: str
    attachments: Optional[List[str]] = None
    status: RfqStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class RfqResponseCreate(CamelModel):
    price: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    currency: str = "QAR"
    delivery_time: Optional[str] = None
    description: Optional[str] = None
    attachments: List[str] = []
    valid_until: Optional[datetime] = None

class RfqResponseDecision(CamelModel):
    is_accepted: bool

class RfqResponse(RfqResponseCreate):
    id: str
    rfq_id: str
    organization_id: str
    attachments: Optional[List[str]] = None
    is_accepted: Optional[bool] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
