from __future__ import annotations

from collections.abc import Generator
from datetime import datetime, timezone
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
from app.platform.security.rating import clear_cache, get_rating_security
from app.sessions.models import HockeySession, RosterPlayer
from app.users.models import Role, User


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
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def reset_security() -> Generator[None, None, None]:
    previous = get_context_provider()
    initialize(ContextVarContextProvider())
    get_settings.cache_clear()
    clear_cache()
    yield
    clear_cache()
    get_settings.cache_clear()
    initialize(previous)


@pytest.fixture()
def seeded(db_session: Session) -> dict[str, object]:
    admin_role = Role(name="Admin")
    admin = User(
        id="admin-1",
        user_name="boss",
        first_name="Bea",
        last_name="Boss",
        rating=Decimal("4.50"),
        roles=[admin_role],
    )
    skater = User(id="skater-1", user_name="skater", first_name="Sam", last_name="Skater", rating=Decimal("3.25"))
    rookie = User(id="rookie-1", user_name="rookie", first_name="Ria", last_name="Rookie", rating=Decimal("0"))
    game = HockeySession(session_date=datetime(2026, 10, 20, 6, 30, tzinfo=timezone.utc), note="Tuesday skate")
    db_session.add_all([admin, skater, rookie, game])
    db_session.flush()

    db_session.add_all(
        [
            RosterPlayer(
                session_id=game.session_id,
                user_id=skater.id,
                first_name="Sam",
                last_name="Skater",
                team_assignment=1,
                position=2,
                rating=Decimal("3.25"),
            ),
            RosterPlayer(
                session_id=game.session_id,
                user_id=admin.id,
                first_name="Bea",
                last_name="Boss",
                team_assignment=2,
                position=1,
                rating=Decimal("4.50"),
            ),
        ]
    )
    db_session.commit()
    return {"session_id": game.session_id}


@pytest.fixture()
def client(db_session: Session) -> Generator[TestClient, None, None]:
    def override_get_db() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _auth(user_id: str | None, *roles: str, name: str = "tester") -> dict[str, str]:
    settings = get_settings()
    claims: dict[str, object] = {"name": name, "roles": list(roles)}
    if user_id is not None:
        claims["sub"] = user_id
    token = jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)
    return {"Authorization": f"Bearer {token}"}


def _ratings(rows: list[dict]) -> dict[str, Decimal]:
    return {row["user_id"] if "user_id" in row else row["id"]: Decimal(str(row["rating"])) for row in rows}


@pytest.mark.parametrize("path", ["/users", "/users/skater-1", "/sessions/1/roster"])
def test_anonymous_caller_is_rejected(client: TestClient, seeded: dict[str, object], path: str) -> None:
    response = client.get(path)

    assert response.status_code == 401
    assert response.json() == {"detail": "User ID not found in context"}


def test_regular_member_gets_basic_profiles(client: TestClient, seeded: dict[str, object]) -> None:
    response = client.get("/users", headers=_auth("skater-1", "Member"))
    assert response.status_code == 200

    body = response.json()
    assert [row["id"] for row in body] == ["admin-1", "rookie-1", "skater-1"]
    for row in body:
        assert "rating" not in row
        assert "roles" not in row

    single = client.get("/users/admin-1", headers=_auth("skater-1", "Member"))
    assert single.status_code == 200
    assert single.json()["user_name"] == "boss"
    assert "rating" not in single.json()


@pytest.mark.parametrize("role", ["Admin", "SubAdmin"])
def test_elevated_caller_sees_real_ratings(client: TestClient, seeded: dict[str, object], role: str) -> None:
    response = client.get("/users", headers=_auth("admin-1", role))
    assert response.status_code == 200

    body = response.json()
    assert [row["last_name"] for row in body] == ["Boss", "Rookie", "Skater"]
    assert _ratings(body) == {"admin-1": Decimal("4.50"), "rookie-1": Decimal("0"), "skater-1": Decimal("3.25")}
    assert body[0]["roles"] == ["Admin"]


def test_elevated_view_is_not_reused_for_next_caller(client: TestClient, seeded: dict[str, object]) -> None:
    session_id = seeded["session_id"]

    elevated = client.get(f"/sessions/{session_id}/roster", headers=_auth("admin-1", "Admin"))
    assert _ratings(elevated.json())["skater-1"] == Decimal("3.25")

    regular = client.get(f"/sessions/{session_id}/roster", headers=_auth("skater-1"))
    assert _ratings(regular.json())["skater-1"] == Decimal("0")


def test_invalid_token_is_treated_as_anonymous(client: TestClient, seeded: dict[str, object]) -> None:
    response = client.get("/users/skater-1", headers={"Authorization": "Bearer not-a-token"})

    assert response.status_code == 401


def test_get_missing_user_returns_404(client: TestClient, seeded: dict[str, object]) -> None:
    response = client.get("/users/nobody", headers=_auth("admin-1", "Admin"))

    assert response.status_code == 404


def test_me_requires_identity(client: TestClient, seeded: dict[str, object]) -> None:
    anonymous = client.get("/users/me")
    assert anonymous.status_code == 401
    assert anonymous.json() == {"detail": "User ID not found in context"}

    without_subject = client.get("/users/me", headers=_auth(None, "Admin"))
    assert without_subject.status_code == 401


def test_me_returns_own_profile_with_masked_rating(client: TestClient, seeded: dict[str, object]) -> None:
    response = client.get("/users/me", headers=_auth("skater-1", "Member"))

    assert response.status_code == 200
    assert response.json()["user_name"] == "skater"
    assert Decimal(str(response.json()["rating"])) == Decimal("0")


def test_roster_ratings_follow_caller_role(client: TestClient, seeded: dict[str, object]) -> None:
    session_id = seeded["session_id"]

    regular = client.get(f"/sessions/{session_id}/roster", headers=_auth("skater-1"))
    assert regular.status_code == 200
    assert set(_ratings(regular.json()).values()) == {Decimal("0")}

    elevated = client.get(f"/sessions/{session_id}/roster", headers=_auth("admin-1", "SubAdmin"))
    assert elevated.status_code == 200
    body = elevated.json()
    assert [row["team_assignment"] for row in body] == [1, 2]
    assert _ratings(body) == {"skater-1": Decimal("3.25"), "admin-1": Decimal("4.50")}


def test_roster_for_missing_session_returns_404(client: TestClient, seeded: dict[str, object]) -> None:
    response = client.get("/sessions/9999/roster", headers=_auth("skater-1"))

    assert response.status_code == 404


def test_clear_rating_cache_requires_elevated_role(client: TestClient, seeded: dict[str, object]) -> None:
    client.get("/users", headers=_auth("admin-1", "Admin"))
    assert len(get_rating_security().cache) > 0

    assert client.delete("/admin/rating-cache").status_code == 401
    assert client.delete("/admin/rating-cache", headers=_auth("skater-1", "Member")).status_code == 403
    assert len(get_rating_security().cache) > 0

    response = client.delete("/admin/rating-cache", headers=_auth("admin-1", "Admin"))
    assert response.status_code == 204
    assert len(get_rating_security().cache) == 0


def test_me_endpoint_reports_principal(client: TestClient) -> None:
    anonymous = client.get("/me")
    assert anonymous.json() == {"authenticated": False, "user_id": None, "name": None, "roles": []}

    response = client.get("/me", headers=_auth("admin-1", "SubAdmin", "Admin", name="Bea"))
    assert response.json() == {
        "authenticated": True,
        "user_id": "admin-1",
        "name": "Bea",
        "roles": ["Admin", "SubAdmin"],
    }
