from datetime import datetime
from typing import Optional
from pydantic import Field, model_validator
from meamar.schemas.base import CamelModel

class ReviewCreate(CamelModel):
    organization_id: Optional[str] = None
    product_id: Optional[str] = None
    order_id: Optional[str] = None
    rating: int = Field(ge=1, le=5)
    title: Optional[str] = None
    comment: Optional[str] = None

    @model_validator(mode="after")
    def check_target(self):
        if not self.organization_id and not self.product_id:
            raise ValueError("organizationId or productId is required")
        return self

class Review(ReviewCreate):
    id: str
    user_id: str
    is_verified: bool = False
    created_at: Optional[datetime] = None
