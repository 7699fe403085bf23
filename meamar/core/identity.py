import logging
from urllib.parse import urlencode
import httpx
from jose import jwt
from meamar.core.config import settings
from meamar.schemas.auth import TokenClaims, TokenResponse

logger = logging.getLogger(__name__)

class IdentityProvider:
    """OIDC identity provider: hosted login, code exchange and ID token verification.

    Sessions and user credentials live with the provider; this service only
    redirects to it and verifies the tokens it signs.
    """

    def __init__(self):
        self.client_id = settings.OIDC_CLIENT_ID
        self.client_secret = settings.OIDC_CLIENT_SECRET
        self.authorization_endpoint = settings.OIDC_AUTHORIZATION_URL
        self.token_endpoint = settings.OIDC_TOKEN_URL
        self.end_session_endpoint = settings.OIDC_END_SESSION_URL
        self.redirect_uri = settings.OIDC_REDIRECT_URI
        self.issuer = settings.OIDC_ISSUER
        self.scopes = settings.OIDC_SCOPES
        self.key = settings.AUTH_JWT_KEY
        self.algorithm = settings.AUTH_JWT_ALGORITHM

    def authorization_url(self, state: str) -> str:
        params = {
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "response_type": "code",
            "scope": self.scopes,
            "state": state,
            "prompt": "login consent",
        }
        return f"{self.authorization_endpoint}?{urlencode(params)}"

    def end_session_url(self, post_logout_redirect_uri: str) -> str:
        params = {
            "client_id": self.client_id,
            "post_logout_redirect_uri": post_logout_redirect_uri,
        }
        return f"{self.end_session_endpoint}?{urlencode(params)}"

    async def exchange_code(self, code: str) -> TokenResponse:
        """Trade an authorization code for tokens.

        Raises:
            httpx.HTTPError: If the token endpoint is unreachable or rejects the code
        """
        data = {
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": self.redirect_uri,
            "client_id": self.client_id,
            "client_secret": self.client_secret,
        }
        async with httpx.AsyncClient() as client:
            response = await client.post(
                self.token_endpoint,
                data=data,
                headers={"Accept": "application/json"},
                timeout=30.0,
            )
            response.raise_for_status()
            result = response.json()

        logger.info("Authorization code exchanged", extra={"event": "auth.code_exchanged"})
        return TokenResponse.model_validate(result)

    def decode_token(self, token: str) -> TokenClaims:
        """Verify signature, expiry and audience and return the claims.

        Raises:
            jose.JWTError: If the token is invalid or expired
            pydantic.ValidationError: If required claims are missing
        """
        payload = jwt.decode(
            token,
            self.key,
            algorithms=[self.algorithm],
            audience=self.client_id,
            issuer=self.issuer,
            options={"verify_at_hash": False},
        )
        return TokenClaims.model_validate(payload)
