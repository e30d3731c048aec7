from __future__ import annotations

from collections.abc import Generator
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import get_settings
from app.core.database import Base, get_db
from app.main import app
from app.platform.security.context import ContextVarContextProvider, get_context_provider, initialize
from app.platform.security.rating import clear_cache
from app.users.models import User


@pytest.fixture()
def db_session() -> Generator[Session, None, None]:
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    session.add(User(id="metrics-user", user_name="metrics", last_name="Metrics", rating=Decimal("3.0")))
    session.commit()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def configure_env(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    monkeypatch.setenv("METRICS_ENABLED", "true")
    previous = get_context_provider()
    initialize(ContextVarContextProvider())
    get_settings.cache_clear()
    clear_cache()
    yield
    clear_cache()
    get_settings.cache_clear()
    initialize(previous)


@pytest.fixture()
def client(db_session: Session) -> Generator[TestClient, None, None]:
    def override_get_db() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _auth(*roles: str, user_id: str = "metrics-admin") -> dict[str, str]:
    settings = get_settings()
    token = jwt.encode({"sub": user_id, "roles": list(roles)}, settings.jwt_secret, algorithm=settings.jwt_algorithm)
    return {"Authorization": f"Bearer {token}"}


def test_metrics_endpoint_exposes_http_and_rating_metrics(client: TestClient) -> None:
    assert client.get("/health").status_code == 200
    assert client.get("/users").status_code == 401
    assert client.get("/users/me", headers=_auth("Member", user_id="metrics-user")).status_code == 200
    assert client.get("/users", headers=_auth("Admin")).status_code == 200
    assert client.get("/users", headers=_auth("Admin")).status_code == 200
    assert client.get("/users/me").status_code == 401

    metrics = client.get("/metrics", headers=_auth("Admin"))
    assert metrics.status_code == 200
    body = metrics.text

    assert "http_requests_total" in body
    assert "http_request_duration_seconds" in body
    assert "rating_cache_hit_total" in body
    assert "rating_cache_miss_total" in body
    assert 'rating_masked_total{entity_type="User"}' in body
    assert 'unauthorized_identity_total{path="/users/me"}' in body
    assert 'unauthorized_identity_total{path="/users"}' in body
    assert 'path="/health"' in body
    assert 'path="/users"' in body


def test_metrics_endpoint_requires_elevated_role(client: TestClient) -> None:
    assert client.get("/metrics").status_code == 403
    assert client.get("/metrics", headers=_auth("Member")).status_code == 403


def test_metrics_endpoint_hidden_when_disabled(client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("METRICS_ENABLED", "false")
    get_settings.cache_clear()

    assert client.get("/metrics", headers=_auth("Admin")).status_code == 404
