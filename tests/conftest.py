import httpx
import pytest
import pytest_asyncio

from quill.config import Settings
from quill.main import create_app
from quill.models.user import Role
from quill.services import accounts


@pytest.fixture
def settings():
    return Settings(
        DATABASE_URL="sqlite+aiosqlite:///:memory:",
        SECRET_KEY="test-secret",
        DEBUG=False,
        LOG_LEVEL="WARNING",
    )


@pytest_asyncio.fixture
async def app(settings):
    app = create_app(settings)
    async with app.router.lifespan_context(app):
        yield app


@pytest_asyncio.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(
        transport=transport, base_url=f"http://test{app.state.settings.API_PREFIX}"
    ) as c:
        yield c


@pytest_asyncio.fixture
async def db(app):
    async with app.state.session_factory() as session:
        yield session


async def register(client, name="Alice", email="a@x.com", password="secret1"):
    resp = await client.post(
        "/auth/register", json={"name": name, "email": email, "password": password}
    )
    assert resp.status_code == 201, resp.text
    return resp.json()["token"]


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def user_headers(client):
    return bearer(await register(client, name="Alice", email="a@x.com"))


@pytest_asyncio.fixture
async def other_headers(client):
    return bearer(await register(client, name="Bob", email="b@x.com"))


@pytest_asyncio.fixture
async def admin_headers(app, db):
    admin = await accounts.register(
        db, name="Admin", email="admin@x.com", password="adminpass", role=Role.ADMIN
    )
    return bearer(app.state.credentials.issue(admin.id, admin.role))


@pytest_asyncio.fixture
async def idea(client, admin_headers):
    resp = await client.post(
        "/ideas",
        json={"title": "Open door", "content": "Write about an open door."},
        headers=admin_headers,
    )
    assert resp.status_code == 201, resp.text
    return resp.json()
