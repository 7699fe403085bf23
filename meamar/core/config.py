import json
from typing import Annotated, List, Optional
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict
from pydantic import field_validator

class Settings(BaseSettings):
    # API Settings
    PROJECT_NAME: str = "Meamar Marketplace API"
    VERSION: str = "1.0.0"
    API_PREFIX: str = "/api"

    # Database Settings
    SQLALCHEMY_DATABASE_URI: str

    # Identity provider (OIDC)
    OIDC_CLIENT_ID: str
    OIDC_CLIENT_SECRET: str
    OIDC_AUTHORIZATION_URL: str
    OIDC_TOKEN_URL: str
    OIDC_END_SESSION_URL: str
    OIDC_REDIRECT_URI: str
    OIDC_ISSUER: Optional[str] = None
    OIDC_SCOPES: str = "openid email profile offline_access"
    AUTH_JWT_KEY: str
    AUTH_JWT_ALGORITHM: str = "RS256"
    SESSION_COOKIE_NAME: str = "meamar_session"
    SESSION_COOKIE_SECURE: bool = True
    POST_LOGOUT_REDIRECT_URI: str = "/"
    LOGIN_STATE_TTL_SECONDS: int = 600

    # CORS Settings
    BACKEND_CORS_ORIGINS: Annotated[List[str], NoDecode] = ["*"]

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v: str | List[str]) -> List[str] | str:
        if isinstance(v, str) and not v.startswith("["):
            return [i.strip() for i in v.split(",")]
        elif isinstance(v, str):
            return json.loads(v)
        elif isinstance(v, list):
            return v
        raise ValueError(v)

    # Redis Settings
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379

    # Object storage (S3 API)
    OBJECT_STORAGE_BUCKET: str
    OBJECT_STORAGE_REGION: str = "me-central-1"
    OBJECT_STORAGE_ENDPOINT_URL: Optional[str] = None
    PRIVATE_OBJECT_DIR: str = ".private"
    UPLOAD_URL_TTL_SECONDS: int = 900

    # Payment processor
    PAYMENT_API_BASE: str = "https://api.stripe.com"
    PAYMENT_SECRET_KEY: str
    PAYMENT_WEBHOOK_SECRET: str
    PAYMENT_WEBHOOK_TOLERANCE_SECONDS: int = 300

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True

    @property
    def DATABASE_URL(self) -> str:
        """Get full database URL."""
        return self.SQLALCHEMY_DATABASE_URI

    @property
    def REDIS_URL(self) -> str:
        """Get full Redis URL."""
        return f"redis://{self.REDIS_HOST}:{self.REDIS_PORT}"

    model_config = SettingsConfigDict(case_sensitive=True, env_file=".env")

settings = Settings()
