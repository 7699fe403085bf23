import logging
import secrets
import time
from typing import Optional
import httpx
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import RedirectResponse
from jose import JWTError
from pydantic import ValidationError
from sqlalchemy.orm import Session

from meamar.api import deps
from meamar.core import cache
from meamar.core.config import settings
from meamar.core.identity import IdentityProvider
from meamar.crud import user as crud_user
from meamar.schemas.user import User as UserSchema, UserUpdate

logger = logging.getLogger(__name__)

router = APIRouter()

USER_NOT_FOUND = "User not found"
IDENTITY_UNAVAILABLE = "Identity provider unavailable"

# Used when a token carries no exp claim
DEFAULT_SESSION_SECONDS = 24 * 60 * 60

def _seconds_left(exp: Optional[int]) -> int:
    if exp is None:
        return DEFAULT_SESSION_SECONDS
    return max(exp - int(time.time()), 0)

@router.get("/auth/user", response_model=UserSchema)
def read_current_user(
    auth: deps.AuthContext = Depends(deps.require_auth),
    db: Session = Depends(deps.get_db),
):
    """
    Get current user information
    """
    user = crud_user.get_user(db, auth.user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=USER_NOT_FOUND)
    return user

@router.patch("/auth/user", response_model=UserSchema)
def update_current_user(
    user_in: UserUpdate,
    auth: deps.AuthContext = Depends(deps.require_auth),
    db: Session = Depends(deps.get_db),
):
    """
    Update profile fields the user controls (name, phone, language, picture).
    Name and picture are synced from the identity provider again only at the next login.
    """
    user = crud_user.get_user(db, auth.user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=USER_NOT_FOUND)
    return crud_user.update_user(db, user, user_in.model_dump(exclude_unset=True))

@router.get("/login")
def login(identity: IdentityProvider = Depends(deps.get_identity_provider)):
    """
    Redirect to the identity provider's hosted login
    """
    state = secrets.token_urlsafe(32)
    cache.store_login_state(state, settings.LOGIN_STATE_TTL_SECONDS)
    return RedirectResponse(identity.authorization_url(state), status_code=status.HTTP_302_FOUND)

@router.get("/callback")
async def callback(
    code: Optional[str] = None,
    state: Optional[str] = None,
    error: Optional[str] = None,
    db: Session = Depends(deps.get_db),
    identity: IdentityProvider = Depends(deps.get_identity_provider),
):
    """
    Finish the login: exchange the code, sync the user and set the session cookie
    """
    retry_login = RedirectResponse(f"{settings.API_PREFIX}/login", status_code=status.HTTP_302_FOUND)

    if error or not code or not state or not cache.consume_login_state(state):
        logger.warning("Login callback rejected", extra={"event": "auth.callback_rejected", "error": error})
        return retry_login

    try:
        tokens = await identity.exchange_code(code)
    except httpx.HTTPError:
        logger.exception("Token exchange failed")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=IDENTITY_UNAVAILABLE)

    try:
        claims = identity.decode_token(tokens.id_token)
    except (JWTError, ValidationError) as e:
        logger.warning("Provider returned an unusable ID token", extra={"reason": str(e)})
        return retry_login

    user = crud_user.upsert_user_from_claims(db, claims, refresh_profile=True)
    logger.info("User logged in", extra={"event": "auth.login", "user_id": user.id})

    response = RedirectResponse("/", status_code=status.HTTP_302_FOUND)
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=tokens.id_token,
        max_age=_seconds_left(claims.exp),
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
    )
    return response

@router.get("/logout")
def logout(
    token: Optional[str] = Depends(deps.get_token),
    identity: IdentityProvider = Depends(deps.get_identity_provider),
):
    """
    Revoke the current token, drop the cookie and end the provider session
    """
    if token:
        try:
            claims = identity.decode_token(token)
        except (JWTError, ValidationError):
            claims = None
        # Expired or foreign tokens are already unusable
        if claims is not None:
            cache.revoke_token(token, _seconds_left(claims.exp))
            logger.info("User logged out", extra={"event": "auth.logout", "user_id": claims.sub})

    response = RedirectResponse(
        identity.end_session_url(settings.POST_LOGOUT_REDIRECT_URI),
        status_code=status.HTTP_302_FOUND,
    )
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return response
