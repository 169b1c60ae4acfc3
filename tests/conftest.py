"""Pytest configuration and fixtures."""

import asyncio
import os
import sys
import tempfile

# Settings are read at import time, so point them at throwaway resources first
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("STORAGE_DIR", tempfile.mkdtemp(prefix="buildledger-storage-"))

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import models  # noqa: F401
from api.tenancy import CallerContext
from auth.jwt import create_access_token
from db import Base
from main import app
from models.organization import Organization
from models.profile import Profile, Role
from models.project import Project
from models.user import User

# Fix Windows asyncio event loop
if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

# In-memory SQLite, one shared connection per test
TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest_asyncio.fixture(scope="function")
async def db_session():
    """Create a test database session on a fresh schema."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    TestSessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with TestSessionLocal() as session:
        yield session
        await session.rollback()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def override_get_db(db_session):
    """Override get_db dependency for testing."""
    from api.deps import get_db

    async def _get_db():
        yield db_session

    app.dependency_overrides[get_db] = _get_db
    yield
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(override_get_db):
    """Create an async test client bound to the app."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


def make_auth_headers(profile: Profile) -> dict:
    """Bearer headers for the user behind a profile."""
    token = create_access_token(profile.user_id, profile.email)
    return {"Authorization": f"Bearer {token}"}


def caller_for(profile: Profile) -> CallerContext:
    return CallerContext.from_profile(profile)


async def create_organization(session: AsyncSession, name: str) -> Organization:
    organization = Organization(name=name)
    session.add(organization)
    await session.commit()
    await session.refresh(organization)
    return organization


async def create_member(
    session: AsyncSession,
    organization: Organization,
    *,
    email: str,
    role: Role = Role.DESIGNER,
) -> Profile:
    """Create a user with a profile in the given organization."""
    user = User(email=email, first_name=email.split("@")[0])
    session.add(user)
    await session.flush()

    profile = Profile(
        user_id=user.id,
        organization_id=organization.id,
        email=email,
        first_name=user.first_name,
        role=role.value,
    )
    session.add(profile)
    await session.commit()
    await session.refresh(profile)
    return profile


async def create_project(
    session: AsyncSession,
    owner: Profile,
    *,
    name: str = "Roof Replacement",
    client_name: str = "Acme",
    project_type: str = "renovation",
    status: str = "planning",
    **fields,
) -> Project:
    """Insert a project directly, bypassing the API."""
    project = Project(
        organization_id=owner.organization_id,
        name=name,
        client_name=client_name,
        project_type=project_type,
        status=status,
        created_by=owner.id,
        **fields,
    )
    session.add(project)
    await session.commit()
    await session.refresh(project)
    return project


@pytest_asyncio.fixture
async def org_a(db_session):
    return await create_organization(db_session, "Organization A")


@pytest_asyncio.fixture
async def org_b(db_session):
    return await create_organization(db_session, "Organization B")


@pytest_asyncio.fixture
async def admin_a(db_session, org_a):
    return await create_member(db_session, org_a, email="admin@org-a.com", role=Role.ADMIN)


@pytest_asyncio.fixture
async def pm_a(db_session, org_a):
    return await create_member(db_session, org_a, email="pm@org-a.com", role=Role.PM)


@pytest_asyncio.fixture
async def designer_a(db_session, org_a):
    return await create_member(db_session, org_a, email="designer@org-a.com", role=Role.DESIGNER)


@pytest_asyncio.fixture
async def accountant_a(db_session, org_a):
    return await create_member(
        db_session, org_a, email="accountant@org-a.com", role=Role.ACCOUNTANT
    )


@pytest_asyncio.fixture
async def admin_b(db_session, org_b):
    return await create_member(db_session, org_b, email="admin@org-b.com", role=Role.ADMIN)


@pytest_asyncio.fixture
async def project_a(db_session, admin_a):
    return await create_project(db_session, admin_a)


@pytest_asyncio.fixture
async def project_b(db_session, admin_b):
    return await create_project(db_session, admin_b, name="Warehouse", client_name="Globex")


@pytest.fixture
def auth_headers():
    """Factory: bearer headers for a profile."""
    return make_auth_headers


@pytest.fixture
def caller():
    """Factory: CallerContext for a profile, for service-level tests."""
    return caller_for


@pytest.fixture
def project_factory(db_session):
    """Factory: insert a project owned by the given profile."""

    async def _create(owner: Profile, **fields) -> Project:
        return await create_project(db_session, owner, **fields)

    return _create
