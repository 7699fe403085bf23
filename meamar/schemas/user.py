from datetime import datetime
from typing import Literal, Optional
from meamar.models.user import UserRole
from meamar.schemas.base import CamelModel

class UserUpdate(CamelModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    profile_image_url: Optional[str] = None
    preferred_language: Optional[Literal["en", "ar"]] = None

class User(CamelModel):
    id: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    role: UserRole
    phone: Optional[str] = None
    preferred_language: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
