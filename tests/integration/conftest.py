import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

import src.domain.entities  # noqa: F401
from config import ApplicationConfig
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.app import create_app
from src.api.utils.jwt import generate_jwt
from src.depends import get_unit_of_work
from src.domain.entities import SystemRole, User

API = ApplicationConfig.API_PREFIX


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine("sqlite+aiosqlite:///./test.db")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with Session() as session:
        yield session


@pytest_asyncio.fixture
async def client(db_session):
    app = create_app(ApplicationConfig)

    async def override_get_unit_of_work():
        yield SqlAlchemyUnitOfWork(db_session)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def create_user(db_session):
    """Seed a user directly; sign-in lives outside this service"""

    async def _create(email: str, role: SystemRole = SystemRole.user, name: str = None):
        user = User(email=email, name=name or email.split("@")[0], role=role)
        db_session.add(user)
        await db_session.commit()
        token = generate_jwt(user.id, role.value)
        return user, {"Authorization": f"Bearer {token}"}

    return _create


@pytest_asyncio.fixture
async def admin(create_user):
    return await create_user("admin@acme.com", SystemRole.admin, "Avery Admin")


@pytest_asyncio.fixture
async def team(client, admin):
    _, headers = admin
    response = await client.post(f"{API}/teams", json={"name": "Acme Platform"}, headers=headers)
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def add_member(client, admin, team, create_user):
    """Create a user and add them to the team with the given role"""

    async def _add(email: str, role: str = "member"):
        _, admin_headers = admin
        user, headers = await create_user(email)
        response = await client.post(
            f"{API}/teams/{team['id']}/members",
            json={"user_id": str(user.id), "role": role},
            headers=admin_headers,
        )
        assert response.status_code == 201
        return user, headers

    return _add
