import time
from typing import Dict

from jose import jwt

from meamar.core.config import settings


def make_token(user_id: str, expires_in: int = 3600, **claims) -> str:
    """An ID token as the identity provider would sign it"""
    payload = {
        "sub": user_id,
        "aud": settings.OIDC_CLIENT_ID,
        "exp": int(time.time()) + expires_in,
        "email": f"{user_id}@example.com",
        "first_name": "Test",
        "last_name": user_id.title(),
    }
    payload.update(claims)
    return jwt.encode(payload, settings.AUTH_JWT_KEY, algorithm=settings.AUTH_JWT_ALGORITHM)


def auth_headers(user_id: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {make_token(user_id)}"}
