import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional
from fastapi import Depends, HTTPException, Request, Security, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from pydantic import ValidationError
from sqlalchemy.orm import Session
from meamar.core import cache
from meamar.core.config import settings
from meamar.core.identity import IdentityProvider
from meamar.core.object_storage import ObjectStorageService
from meamar.core.payments import PaymentClient
from meamar.crud import user as crud_user
from meamar.db.session import get_db, get_session_factory
from meamar.models.user import UserRole

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)

UNAUTHORIZED = "Unauthorized"
ADMIN_REQUIRED = "Admin access required"

__all__ = [
    "AuthContext",
    "get_db",
    "get_session_factory",
    "get_identity_provider",
    "get_object_storage",
    "get_payment_client",
    "get_token",
    "optional_auth",
    "require_auth",
    "require_admin",
]

@dataclass(frozen=True)
class AuthContext:
    """Who is calling; handed to handlers explicitly, never stored globally"""

    user_id: str
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

@lru_cache()
def get_identity_provider() -> IdentityProvider:
    return IdentityProvider()

@lru_cache()
def get_object_storage() -> ObjectStorageService:
    return ObjectStorageService()

@lru_cache()
def get_payment_client() -> PaymentClient:
    return PaymentClient()

def get_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security),
) -> Optional[str]:
    """Bearer header first, then the session cookie set by the login callback"""
    if credentials:
        return credentials.credentials
    return request.cookies.get(settings.SESSION_COOKIE_NAME)

def optional_auth(
    token: Optional[str] = Depends(get_token),
    db: Session = Depends(get_db),
    identity: IdentityProvider = Depends(get_identity_provider),
) -> Optional[AuthContext]:
    if not token:
        return None

    try:
        claims = identity.decode_token(token)
    except (JWTError, ValidationError) as e:
        logger.info("Rejected identity token", extra={"reason": str(e)})
        return None

    if cache.is_token_revoked(token):
        return None

    user = crud_user.upsert_user_from_claims(db, claims)
    return AuthContext(user_id=user.id, role=user.role)

def require_auth(auth: Optional[AuthContext] = Depends(optional_auth)) -> AuthContext:
    if auth is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=UNAUTHORIZED,
        )
    return auth

def require_admin(auth: AuthContext = Depends(require_auth)) -> AuthContext:
    if not auth.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=ADMIN_REQUIRED,
        )
    return auth
