"""Shared fixtures: an in-memory database, an API client and seed helpers."""

import os
import tempfile

# Must be set before anything from tavern is imported
os.environ.setdefault("TAVERN_DATABASE_URL", "sqlite://")
os.environ.setdefault("TAVERN_DATA_DIR", tempfile.mkdtemp(prefix="tavern-test-"))
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")
for _chain_var in (
    "TAVERN_RPC_URL",
    "TAVERN_MINT_PRIVATE_KEY",
    "TAVERN_CHARACTER_MINT_ADDRESS",
    "TAVERN_BADGE_MINT_ADDRESS",
):
    os.environ[_chain_var] = ""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from tavern.app import app
from tavern.core.database import get_db
from tavern.core.dependencies import get_chain_minter
from tavern.models.base import Base
from tavern.schemas.user import User
from tavern.utils.campaign_manager import CampaignManager
from tavern.utils.chain_service import ChainMinter
from tavern.utils.character_manager import CharacterManager
from tavern.utils.user_manager import UserManager

PASSWORD = "correct-horse"


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_chain_minter] = lambda: ChainMinter(
        rpc_url="", private_key="", character_address="", badge_address=""
    )
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


# --- Manager-level seed helpers ---


@pytest.fixture
def make_user(db):
    def _make(email: str, display_name: str = None) -> User:
        return UserManager(db, bcrypt_rounds=4).create_user(
            email=email, password=PASSWORD, display_name=display_name
        )

    return _make


@pytest.fixture
def make_campaign(db):
    def _make(owner: User, name: str = "Curse of the Salt Marsh"):
        return CampaignManager(db).create_campaign(owner, name)

    return _make


@pytest.fixture
def make_character(db):
    def _make(owner: User, name: str = "Brindle", **kwargs):
        return CharacterManager(db).create_character(owner, name, **kwargs)

    return _make


# --- HTTP helpers ---


def register(client: TestClient, email: str, password: str = PASSWORD) -> str:
    """Register and log in, returning the user id."""
    response = client.post(
        "/api/auth/register", json={"email": email, "password": password}
    )
    assert response.status_code == 201, response.text
    return response.json()["user_id"]


def login_headers(client: TestClient, email: str, password: str = PASSWORD) -> dict:
    response = client.post("/api/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture
def signup(client):
    """Register a user over HTTP and return auth headers for them."""

    def _signup(email: str) -> dict:
        register(client, email)
        return login_headers(client, email)

    return _signup


def create_campaign(client: TestClient, headers: dict, name: str = "Salt Marsh") -> str:
    response = client.post("/api/campaigns", json={"name": name}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["id"]


def create_character(client: TestClient, headers: dict, name: str = "Brindle") -> str:
    response = client.post("/api/characters", json={"name": name}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["id"]


def create_invite(client: TestClient, headers: dict, campaign_id: str, **body) -> dict:
    response = client.post(
        f"/api/campaigns/{campaign_id}/invites", json=body, headers=headers
    )
    assert response.status_code == 201, response.text
    return response.json()


def create_session(
    client: TestClient, headers: dict, campaign_id: str, title: str = "Session 1"
) -> str:
    response = client.post(
        "/api/sessions",
        json={"campaign_id": campaign_id, "title": title},
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()["id"]
