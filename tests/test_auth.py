from sqlalchemy import func, select

from conftest import bearer, register
from quill.middleware import SECURITY_HEADERS
from quill.models.user import Role, User
from quill.services.credentials import CredentialService


async def test_register_returns_usable_token(client):
    token = await register(client, name="Alice", email="a@x.com")

    resp = await client.get("/auth/me", headers=bearer(token))

    assert resp.status_code == 200
    body = resp.json()
    assert body["email"] == "a@x.com"
    assert body["name"] == "Alice"
    assert body["role"] == "USER"
    assert "passwordHash" not in body and "password_hash" not in body


async def test_register_twice_with_same_email_fails(client, db):
    await register(client, email="a@x.com")

    resp = await client.post(
        "/auth/register", json={"name": "Again", "email": "A@X.com", "password": "secret2"}
    )

    assert resp.status_code == 400
    assert resp.json()["message"] == "user already exists"
    count = (await db.execute(select(func.count(User.id)))).scalar()
    assert count == 1


async def test_register_reports_every_invalid_field(client):
    resp = await client.post(
        "/auth/register", json={"name": "A", "email": "not-an-email", "password": "123"}
    )

    assert resp.status_code == 400
    body = resp.json()
    assert body["message"] == "validation failed"
    assert {e["field"] for e in body["errors"]} == {"name", "email", "password"}


async def test_register_never_grants_admin(client, db):
    resp = await client.post(
        "/auth/register",
        json={"name": "Mallory", "email": "m@x.com", "password": "secret1", "role": "ADMIN"},
    )

    assert resp.status_code == 201
    user = (await db.execute(select(User).where(User.email == "m@x.com"))).scalar_one()
    assert user.role == Role.USER


async def test_login_with_valid_credentials(client):
    await register(client, email="a@x.com", password="secret1")

    resp = await client.post("/auth/login", json={"email": "a@x.com", "password": "secret1"})

    assert resp.status_code == 200
    me = await client.get("/auth/me", headers=bearer(resp.json()["token"]))
    assert me.json()["email"] == "a@x.com"


async def test_login_wrong_password_and_unknown_email_look_the_same(client):
    await register(client, email="a@x.com", password="secret1")

    wrong = await client.post("/auth/login", json={"email": "a@x.com", "password": "nope123"})
    unknown = await client.post("/auth/login", json={"email": "z@x.com", "password": "secret1"})

    assert wrong.status_code == unknown.status_code == 400
    assert wrong.json() == unknown.json() == {"message": "invalid credentials"}


async def test_me_without_token(client):
    resp = await client.get("/auth/me")

    assert resp.status_code == 401
    assert resp.headers["www-authenticate"] == "Bearer"


async def test_me_with_malformed_token(client):
    resp = await client.get("/auth/me", headers=bearer("garbage"))

    assert resp.status_code == 401
    assert resp.json() == {"message": "token invalid"}


async def test_me_with_expired_token(client, app, user_headers):
    expired = CredentialService("test-secret", expire_minutes=-1).issue(1, Role.USER)

    resp = await client.get("/auth/me", headers=bearer(expired))

    assert resp.status_code == 401
    assert resp.json() == {"message": "token expired"}


async def test_me_with_token_for_unknown_user(client, app):
    token = app.state.credentials.issue(999, Role.USER)

    resp = await client.get("/auth/me", headers=bearer(token))

    assert resp.status_code == 401
    assert resp.json() == {"message": "user not found"}


async def test_role_is_read_from_the_database(client, app, user_headers):
    # A USER token that claims ADMIN still cannot write the catalog.
    forged = app.state.credentials.issue(1, Role.ADMIN)

    resp = await client.post(
        "/ideas", json={"title": "ab", "content": "cd"}, headers=bearer(forged)
    )

    assert resp.status_code == 403


async def test_health(client):
    resp = await client.get("http://test/health")

    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


async def test_api_routes_live_under_the_prefix(client, user_headers):
    prefixed = await client.get("http://test/api/auth/me", headers=user_headers)
    bare = await client.get("http://test/auth/me", headers=user_headers)

    assert prefixed.status_code == 200
    assert bare.status_code == 404


async def test_responses_carry_security_headers(client):
    for resp in (await client.get("http://test/health"), await client.get("/auth/me")):
        for name, value in SECURITY_HEADERS.items():
            assert resp.headers[name] == value
