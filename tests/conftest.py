"""
Pytest fixtures: test client, registered user, auth headers.
Environment is set before the app is imported; settings are cached on first use.
"""

import os

os.environ.setdefault("JWT_SECRET", "test-secret-key-that-is-long-enough-for-hs256")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient

from core.config import get_settings
from core.security import PasswordHasher, TokenService
from main import create_app
from services.auth_gateway import AuthGateway
from services.credential_store import CredentialStore

ALICE = {"username": "alice", "email": "alice@x.com", "password": "pw123"}


@pytest.fixture
def hasher() -> PasswordHasher:
    return PasswordHasher(rounds=4)


@pytest.fixture
def token_service() -> TokenService:
    return TokenService(secret=get_settings().JWT_SECRET)


@pytest.fixture
def store() -> CredentialStore:
    return CredentialStore()


@pytest.fixture
def gateway(store: CredentialStore, hasher: PasswordHasher, token_service: TokenService) -> AuthGateway:
    return AuthGateway(store=store, hasher=hasher, tokens=token_service)


@pytest.fixture
def client() -> TestClient:
    """Test client with a fresh app, so every test starts with an empty store."""
    return TestClient(create_app())


@pytest.fixture
def registered_user(client: TestClient) -> dict:
    r = client.post("/api/register", json=ALICE)
    assert r.status_code == 201
    return r.json()["user"]


@pytest.fixture
def auth_headers(client: TestClient, registered_user: dict) -> dict[str, str]:
    r = client.post("/api/login", json={"email": ALICE["email"], "password": ALICE["password"]})
    assert r.status_code == 200
    return {"Authorization": f"Bearer {r.json()['token']}"}
