"""Pytest configuration and fixtures."""

import os

# Settings are read at import time, so the environment must be in place first
os.environ.update(
    {
        "SQLALCHEMY_DATABASE_URI": "sqlite://",
        "OIDC_CLIENT_ID": "meamar-web",
        "OIDC_CLIENT_SECRET": "test-client-secret",
        "OIDC_AUTHORIZATION_URL": "https://id.example.test/authorize",
        "OIDC_TOKEN_URL": "https://id.example.test/token",
        "OIDC_END_SESSION_URL": "https://id.example.test/logout",
        "OIDC_REDIRECT_URI": "http://testserver/api/callback",
        "AUTH_JWT_KEY": "test-signing-key",
        "AUTH_JWT_ALGORITHM": "HS256",
        "SESSION_COOKIE_SECURE": "false",
        "OBJECT_STORAGE_BUCKET": "meamar-test",
        "PAYMENT_SECRET_KEY": "sk_test_123",
        "PAYMENT_WEBHOOK_SECRET": "whsec_test",
        "LOG_JSON": "false",
        "AWS_ACCESS_KEY_ID": "testing",
        "AWS_SECRET_ACCESS_KEY": "testing",
    }
)

from decimal import Decimal
from typing import Dict, Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker

from meamar.api import deps
from meamar.core import cache
from meamar.db.base import Base
from meamar.main import app
from meamar.models.organization import Organization, OrganizationStatus
from meamar.models.product import Product
from meamar.models.user import User, UserRole
from tests.helpers import auth_headers


class FakeRedis:
    """The handful of redis commands the app uses, kept in a dict"""

    def __init__(self):
        self.store: Dict[str, str] = {}

    def setex(self, key, ttl, value):
        self.store[key] = value
        return True

    def get(self, key):
        return self.store.get(key)

    def delete(self, *keys):
        return sum(1 for key in keys if self.store.pop(key, None) is not None)


@pytest.fixture(autouse=True)
def fake_redis(monkeypatch) -> FakeRedis:
    fake = FakeRedis()
    monkeypatch.setattr(cache, "redis_client", fake)
    return fake


@pytest.fixture
def session_factory(tmp_path) -> sessionmaker:
    """
    A fresh SQLite file database per test. A file (not :memory:) so that
    concurrent sessions each get their own connection.
    """
    engine = create_engine(
        f"sqlite:///{tmp_path / 'meamar.db'}",
        connect_args={"check_same_thread": False},
    )

    # SQLite leaves foreign keys unchecked unless asked, PostgreSQL always checks them
    @event.listens_for(engine, "connect")
    def enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(engine)
    try:
        yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    finally:
        Base.metadata.drop_all(engine)
        engine.dispose()


@pytest.fixture
def db_session(session_factory) -> Session:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory) -> TestClient:
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[deps.get_db] = override_get_db
    app.dependency_overrides[deps.get_session_factory] = lambda: session_factory
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def buyer_headers() -> Dict[str, str]:
    return auth_headers("buyer-1")


@pytest.fixture
def vendor_headers() -> Dict[str, str]:
    return auth_headers("vendor-1")


@pytest.fixture
def admin_headers(db_session) -> Dict[str, str]:
    # Roles are never taken from claims, so the admin row must exist up front
    db_session.add(User(id="admin-1", email="admin-1@example.com", role=UserRole.ADMIN))
    db_session.commit()
    return auth_headers("admin-1")


@pytest.fixture
def make_user(db_session):
    def _make_user(user_id: str, role: UserRole = UserRole.BUYER) -> User:
        user = User(id=user_id, email=f"{user_id}@example.com", role=role)
        db_session.add(user)
        db_session.commit()
        return user

    return _make_user


@pytest.fixture
def make_organization(db_session):
    def _make_organization(
        owner_id: str,
        legal_name: str = "Doha Build Supplies W.L.L.",
        status: OrganizationStatus = OrganizationStatus.ACTIVE,
        rating: Optional[Decimal] = None,
    ) -> Organization:
        if db_session.get(User, owner_id) is None:
            db_session.add(User(id=owner_id, email=f"{owner_id}@example.com", role=UserRole.VENDOR))
        organization = Organization(
            user_id=owner_id,
            legal_name=legal_name,
            status=status,
            rating=rating,
            review_count=0,
        )
        db_session.add(organization)
        db_session.commit()
        db_session.refresh(organization)
        return organization

    return _make_organization


@pytest.fixture
def make_product(db_session):
    def _make_product(
        organization: Organization,
        name: str = "Porcelain floor tile 60x60",
        price: Optional[Decimal] = Decimal("45.00"),
        is_active: bool = True,
        min_order_quantity: int = 1,
    ) -> Product:
        product = Product(
            organization_id=organization.id,
            name=name,
            price=price,
            is_active=is_active,
            min_order_quantity=min_order_quantity,
            review_count=0,
        )
        db_session.add(product)
        db_session.commit()
        db_session.refresh(product)
        return product

    return _make_product
