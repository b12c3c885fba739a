"""
API response and contract tests.
"""

from fastapi.testclient import TestClient

from core.security import PasswordHasher, TokenService
from main import create_app
from services.auth_gateway import AuthGateway
from services.credential_store import CredentialStore

ALICE = {"username": "alice", "email": "alice@x.com", "password": "pw123"}


def test_health_ok(client: TestClient) -> None:
    r = client.get("/health")
    assert r.status_code == 200
    data = r.json()
    assert data["status"] == "ok"
    assert data["service"] == "auth-service"


def test_health_ready(client: TestClient) -> None:
    r = client.get("/health/ready")
    assert r.status_code == 200
    data = r.json()
    assert data["ready"] is True
    assert data["checks"]["credential_store"] == "ok"


def test_health_ready_without_store() -> None:
    gateway = AuthGateway(
        store=None,  # type: ignore[arg-type]
        hasher=PasswordHasher(rounds=4),
        tokens=TokenService(secret="x" * 32),
    )
    r = TestClient(create_app(gateway)).get("/health/ready")
    assert r.status_code == 503
    assert r.json() == {"ready": False, "checks": {"config": "loaded", "credential_store": "missing"}}


def test_health_live(client: TestClient) -> None:
    assert client.get("/health/live").status_code == 200


def test_end_to_end_flow(client: TestClient) -> None:
    r = client.post("/api/register", json=ALICE)
    assert r.status_code == 201
    body = r.json()
    assert body["message"] == "User registered successfully"
    assert body["user"] == {"id": 1, "username": "alice", "email": "alice@x.com"}

    r = client.post("/api/login", json={"email": "alice@x.com", "password": "pw123"})
    assert r.status_code == 200
    body = r.json()
    assert body["message"] == "Login successful"
    assert body["token"]
    assert body["user"]["id"] == 1

    r = client.get("/api/profile", headers={"Authorization": f"Bearer {body['token']}"})
    assert r.status_code == 200
    assert r.json() == {
        "message": "Profile retrieved successfully",
        "user": {"id": 1, "username": "alice", "email": "alice@x.com"},
    }

    assert client.get("/api/profile").status_code == 401
    assert client.get("/api/public").status_code == 200


def test_register_response_has_no_password(client: TestClient) -> None:
    r = client.post("/api/register", json=ALICE)
    assert "password" not in r.text
    assert "pw123" not in r.text


def test_register_missing_field(client: TestClient) -> None:
    r = client.post("/api/register", json={"username": "alice", "email": "alice@x.com"})
    assert r.status_code == 400
    assert r.json() == {"message": "All fields are required"}


def test_register_empty_field(client: TestClient) -> None:
    r = client.post("/api/register", json={**ALICE, "username": ""})
    assert r.status_code == 400


def test_register_duplicate_email(client: TestClient, registered_user: dict) -> None:
    r = client.post("/api/register", json={**ALICE, "username": "alice2", "password": "other"})
    assert r.status_code == 400
    assert r.json() == {"message": "User already exists"}


def test_register_ids_are_sequential(client: TestClient) -> None:
    first = client.post("/api/register", json=ALICE).json()["user"]["id"]
    second = client.post(
        "/api/register", json={"username": "bob", "email": "bob@x.com", "password": "pw"}
    ).json()["user"]["id"]
    assert (first, second) == (1, 2)


def test_register_without_body(client: TestClient) -> None:
    r = client.post("/api/register")
    assert r.status_code == 400
    assert r.json() == {"message": "All fields are required"}


def test_register_nul_in_password(client: TestClient) -> None:
    r = client.post("/api/register", json={**ALICE, "password": "pw\u0000123"})
    assert r.status_code == 400
    assert r.json() == {"message": "Password contains unsupported characters"}


def test_register_non_object_body(client: TestClient) -> None:
    r = client.post("/api/register", json=["alice"])
    assert r.status_code == 422


def test_login_missing_field(client: TestClient) -> None:
    r = client.post("/api/login", json={"email": "alice@x.com"})
    assert r.status_code == 400
    assert r.json() == {"message": "Email and password are required"}


def test_login_without_body(client: TestClient) -> None:
    r = client.post("/api/login")
    assert r.status_code == 400
    assert r.json() == {"message": "Email and password are required"}


def test_login_invalid_credentials_identical(client: TestClient, registered_user: dict) -> None:
    unknown = client.post("/api/login", json={"email": "nobody@x.com", "password": "anything"})
    wrong = client.post("/api/login", json={"email": "alice@x.com", "password": "wrongpassword"})
    assert unknown.status_code == wrong.status_code == 401
    assert unknown.json() == wrong.json() == {"message": "Invalid credentials"}


def test_profile_without_token(client: TestClient) -> None:
    r = client.get("/api/profile")
    assert r.status_code == 401
    assert r.json() == {"message": "Access token required"}
    assert r.headers.get("WWW-Authenticate") == "Bearer"


def test_profile_with_non_bearer_scheme(client: TestClient) -> None:
    r = client.get("/api/profile", headers={"Authorization": "Basic dXNlcjpwYXNz"})
    assert r.status_code == 401


def test_profile_invalid_token(client: TestClient) -> None:
    r = client.get("/api/profile", headers={"Authorization": "Bearer not-a-real-token"})
    assert r.status_code == 403
    assert r.json() == {"message": "Invalid or expired token"}


def test_profile_token_from_other_secret(client: TestClient, registered_user: dict) -> None:
    forged = TokenService(secret="attacker-secret-0123456789abcdef").issue(1, "alice@x.com")
    r = client.get("/api/profile", headers={"Authorization": f"Bearer {forged}"})
    assert r.status_code == 403


def test_profile_subject_not_found() -> None:
    gateway = AuthGateway(
        store=CredentialStore(),
        hasher=PasswordHasher(rounds=4),
        tokens=TokenService(secret="x" * 32),
    )
    client = TestClient(create_app(gateway))
    token = gateway.tokens.issue(99, "ghost@x.com")
    r = client.get("/api/profile", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 404
    assert r.json() == {"message": "User not found"}


def test_profile_with_auth_headers(client: TestClient, auth_headers: dict[str, str]) -> None:
    r = client.get("/api/profile", headers=auth_headers)
    assert r.status_code == 200
    assert r.json()["user"]["email"] == "alice@x.com"


def test_public_route(client: TestClient, auth_headers: dict[str, str]) -> None:
    assert client.get("/api/public").json() == {"message": "This is a public route"}
    assert client.get("/api/public", headers=auth_headers).status_code == 200
    r = client.get("/api/public", headers={"Authorization": "Bearer garbage"})
    assert r.status_code == 200


def test_internal_failure_is_generic_500() -> None:
    class BrokenStore(CredentialStore):
        def find_by_email(self, email):
            raise RuntimeError("store corrupted: /var/lib/secret")

    gateway = AuthGateway(
        store=BrokenStore(),
        hasher=PasswordHasher(rounds=4),
        tokens=TokenService(secret="x" * 32),
    )
    client = TestClient(create_app(gateway), raise_server_exceptions=False)
    r = client.post("/api/login", json={"email": "a@x.com", "password": "pw"})
    assert r.status_code == 500
    assert r.json() == {"message": "Internal server error"}
    assert "corrupted" not in r.text


def test_openapi_available(client: TestClient) -> None:
    r = client.get("/openapi.json")
    assert r.status_code == 200
    paths = r.json()["paths"]
    for path in ("/api/register", "/api/login", "/api/profile", "/api/public", "/health"):
        assert path in paths
