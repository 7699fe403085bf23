from typing import Optional
from pydantic import BaseModel, ConfigDict

class TokenClaims(BaseModel):
    """Claims the identity provider puts in its ID tokens"""

    model_config = ConfigDict(extra="ignore")

    sub: str
    exp: Optional[int] = None
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None

class TokenResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id_token: str
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    expires_in: Optional[int] = None
