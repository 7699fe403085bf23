from datetime import datetime
from typing import Optional
from pydantic import Field
from meamar.schemas.base import CamelModel

class CategoryBase(CamelModel):
    name: str = Field(min_length=1)
    name_ar: Optional[str] = None
    description: Optional[str] = None
    description_ar: Optional[str] = None
    icon_url: Optional[str] = None
    parent_id: Optional[str] = None
    is_active: bool = True
    sort_order: int = 0

class CategoryCreate(CategoryBase):
    pass

class Category(CategoryBase):
    id: str
    created_at: Optional[datetime] = None
