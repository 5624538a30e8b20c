import pytest
from sqlalchemy import func, select

from config import settings
from models.auth_user import AuthUser
from services.credentials import authenticate_user, ensure_bootstrap_account, hash_password, verify_password


@pytest.mark.asyncio
async def test_login_returns_bearer_token_usable_on_guarded_routes(api_client, make_instructor):
    instructor_id, _headers = await make_instructor("coach", "secret-pass")

    login = await api_client.post("/auth/login", json={"username": "coach", "password": "secret-pass"})
    assert login.status_code == 200
    body = login.json()
    assert body["tokenType"] == "Bearer"
    assert body["expiresIn"] == settings.JWT_EXPIRATION_MINUTES * 60

    me = await api_client.get("/auth/me", headers={"Authorization": f"Bearer {body['accessToken']}"})
    assert me.status_code == 200
    assert me.json()["instructorId"] == instructor_id
    assert me.json()["username"] == "coach"
    assert me.json()["displayName"] == "Coach"


@pytest.mark.asyncio
async def test_login_with_wrong_password_is_rejected(api_client, make_instructor):
    await make_instructor("coach", "secret-pass")

    wrong = await api_client.post("/auth/login", json={"username": "coach", "password": "nope-nope"})
    unknown = await api_client.post("/auth/login", json={"username": "ghost", "password": "secret-pass"})

    assert wrong.status_code == 401
    assert unknown.status_code == 401
    assert wrong.json()["detail"] == unknown.json()["detail"]
    assert wrong.headers["www-authenticate"] == "Bearer"


@pytest.mark.asyncio
async def test_login_with_missing_fields_is_bad_request(api_client):
    response = await api_client.post("/auth/login", json={"username": "coach"})
    assert response.status_code == 400


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "method,path",
    [
        ("get", "/clients"),
        ("post", "/clients"),
        ("get", "/clients/some-id"),
        ("get", "/sessions?date=2026-10-18"),
        ("get", "/sessions/with-report?date=2026-10-18"),
        ("post", "/reports"),
        ("get", "/reports/some-id"),
        ("post", "/reports/some-id/share"),
        ("get", "/auth/me"),
    ],
)
async def test_guarded_routes_require_bearer_token(api_client, method, path):
    response = await getattr(api_client, method)(path)
    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "header",
    [
        "Bearer not-a-token",
        "Bearer ",
        "Basic Y29hY2g6c2VjcmV0",
    ],
)
async def test_invalid_credentials_are_rejected_before_handler(api_client, header):
    response = await api_client.get("/clients", headers={"Authorization": header})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_public_routes_do_not_require_token(api_client):
    live = await api_client.get("/health/live")
    root = await api_client.get("/")
    share = await api_client.get("/share/0123456789abcdef0123456789abcdef")

    assert live.status_code == 200
    assert root.status_code == 200
    assert share.status_code == 404


@pytest.mark.asyncio
async def test_logout_acknowledges_authenticated_caller(api_client, make_instructor):
    _instructor_id, headers = await make_instructor("coach")
    response = await api_client.post("/auth/logout", headers=headers)
    assert response.status_code == 200


def test_password_hash_round_trip():
    hashed = hash_password("pass1234")
    assert hashed != "pass1234"
    assert verify_password("pass1234", hashed)
    assert not verify_password("pass12345", hashed)
    assert not verify_password("pass1234", None)
    assert not verify_password("pass1234", "not-a-hash")


@pytest.mark.asyncio
async def test_authenticate_user_trims_username(session_maker, make_instructor):
    instructor_id, _headers = await make_instructor("coach", "secret-pass")
    async with session_maker() as db:
        user = await authenticate_user(db, "  coach ", "secret-pass")
        assert user is not None
        assert user.instructor_id == instructor_id
        assert await authenticate_user(db, "", "secret-pass") is None
        assert await authenticate_user(db, "coach", "") is None


@pytest.mark.asyncio
async def test_bootstrap_account_is_seeded_once(session_maker, monkeypatch):
    monkeypatch.setattr(settings, "BOOTSTRAP_USERNAME", "admin")
    monkeypatch.setattr(settings, "BOOTSTRAP_PASSWORD", "admin-pass-123")

    async with session_maker() as db:
        first = await ensure_bootstrap_account(db)
    async with session_maker() as db:
        second = await ensure_bootstrap_account(db)
        count = (await db.execute(select(func.count()).select_from(AuthUser))).scalar_one()
        user = await authenticate_user(db, "admin", "admin-pass-123")

    assert first.instructor_id == second.instructor_id
    assert count == 1
    assert user is not None


@pytest.mark.asyncio
async def test_bootstrap_is_skipped_without_username(session_maker, monkeypatch):
    monkeypatch.setattr(settings, "BOOTSTRAP_USERNAME", "")
    async with session_maker() as db:
        assert await ensure_bootstrap_account(db) is None
