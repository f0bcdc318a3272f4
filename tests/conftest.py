import asyncio
import os
from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

# Set test environment variables - use in-memory SQLite for testing
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["POINTER_BACKEND"] = "memory"
os.environ["REDIS_URL"] = "redis://localhost:6379/0"

from tenancy.core.database import Base, get_db  # noqa: E402
from tenancy.core.roles import Role  # noqa: E402
from tenancy.models import Organization, Membership  # noqa: E402
from tenancy.http_server.ingress import create_app  # noqa: E402
from tenancy.schemas.membership import MembershipRecord  # noqa: E402
from tenancy.schemas.organization import OrganizationResponse  # noqa: E402
from tenancy.session.persistence import InMemoryPointerStore  # noqa: E402
from tenancy.session.sources import StaticMembershipSource  # noqa: E402
from tenancy.session.store import TenancySessionStore  # noqa: E402

# ASYNC engine for tests (in-memory with StaticPool)
ASYNC_TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
async_test_engine = create_async_engine(
    ASYNC_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
AsyncTestSessionLocal = async_sessionmaker(
    async_test_engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)

BASE_TIME = datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc)


# =============================================================================
# Session store helpers
# =============================================================================

def make_organization(org_id: int, plan: str = "free", name: str = None) -> OrganizationResponse:
    return OrganizationResponse(
        id=org_id,
        name=name or f"Company {org_id}",
        slug=f"company-{org_id}",
        plan=plan,
    )


def make_record(org_id: int, role: str, joined_offset_days: int = 0) -> MembershipRecord:
    return MembershipRecord(
        organization=make_organization(org_id),
        role=role,
        joined_at=BASE_TIME + timedelta(days=joined_offset_days),
    )


class GatedSource:
    """Membership source that blocks until released."""

    def __init__(self, records):
        self.records = records
        self.release = asyncio.Event()
        self.started = asyncio.Event()
        self.calls = 0

    async def fetch_memberships(self, user_id):
        self.calls += 1
        self.started.set()
        await self.release.wait()
        return list(self.records)

    def hold(self):
        """Block the next fetch again."""
        self.release.clear()
        self.started.clear()


@pytest.fixture
def two_memberships():
    """User 1 is admin of organization 1 and employee of organization 2."""
    return [make_record(1, "admin"), make_record(2, "employee", 1)]


@pytest.fixture
def static_source(two_memberships):
    return StaticMembershipSource({1: two_memberships, 7: []})


@pytest.fixture
def pointer_store():
    return InMemoryPointerStore()


@pytest.fixture
def store(static_source, pointer_store):
    return TenancySessionStore(static_source, pointer_store)


# =============================================================================
# Test App Fixture
# =============================================================================

@pytest.fixture(scope="session")
def test_app():
    """Create the FastAPI app with all v1 routers."""
    return create_app()


# =============================================================================
# Database Session Fixtures
# =============================================================================

@pytest_asyncio.fixture(scope="function")
async def async_db_session():
    """Create a fresh ASYNC database session for each test."""
    async with async_test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    async with AsyncTestSessionLocal() as session:
        yield session
    async with async_test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


# =============================================================================
# Client Fixtures
# =============================================================================

@pytest_asyncio.fixture(scope="function")
async def async_client(test_app, async_db_session):
    """Create async test client with ASYNC database override."""
    import httpx

    async def override_get_db():
        yield async_db_session
        await async_db_session.commit()

    test_app.dependency_overrides[get_db] = override_get_db
    transport = httpx.ASGITransport(app=test_app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    test_app.dependency_overrides.clear()


# =============================================================================
# Sample Data Fixtures
# =============================================================================

@pytest_asyncio.fixture
async def sample_organizations(async_db_session):
    """Two organizations; user 1 is admin of the first and employee of the second."""
    acme = Organization(
        name="Acme Corporation",
        slug="acme-corp",
        plan="professional",
        industry="Manufacturing",
        settings={"timezone": "America/New_York", "date_format": "MM/DD/YYYY", "currency": "USD"},
        branding={"theme_mode": "light"},
        features=["employee_management"],
    )
    techstart = Organization(
        name="TechStart Inc",
        slug="techstart",
        plan="enterprise",
        industry="Technology",
        settings={"timezone": "America/Los_Angeles", "date_format": "MM/DD/YYYY", "currency": "USD"},
        branding={"theme_mode": "dark"},
        features=["kanban_boards"],
    )
    async_db_session.add_all([acme, techstart])
    await async_db_session.flush()

    async_db_session.add_all([
        Membership(user_id=1, organization_id=acme.id, role=Role.ADMIN.value, joined_at=BASE_TIME),
        Membership(
            user_id=1,
            organization_id=techstart.id,
            role=Role.EMPLOYEE.value,
            joined_at=BASE_TIME + timedelta(days=60),
        ),
    ])
    await async_db_session.commit()
    return acme, techstart
