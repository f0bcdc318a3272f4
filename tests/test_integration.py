"""End-to-end: session store loading over HTTP and scoping requests back to the API."""
import httpx
import pytest

from tenancy.core.roles import Role
from tenancy.schemas.session import SessionState
from tenancy.services.membership_service import membership_service
from tenancy.session.persistence import JsonFilePointerStore
from tenancy.session.scoping import TenantScopedAuth
from tenancy.session.sources import HttpMembershipSource
from tenancy.session.store import TenancySessionStore


@pytest.mark.asyncio
async def test_boot_switch_and_scoped_requests(test_app, async_client, sample_organizations, tmp_path):
    acme, techstart = sample_organizations
    pointer = JsonFilePointerStore(tmp_path / "session.json")
    store = TenancySessionStore(HttpMembershipSource("http://test", client=async_client), pointer)

    outcome = await store.load_memberships(1)

    assert outcome.state == SessionState.READY
    assert store.current_context().organization.id == acme.id
    assert store.current_context().role == Role.ADMIN

    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=test_app),
        base_url="http://test",
        auth=TenantScopedAuth(store),
        headers={"X-User-Id": "1"},
    ) as api:
        first = await api.get("/api/v1/organizations/current")
        await store.switch_to(techstart.id)
        second = await api.get("/api/v1/organizations/current")

    assert first.json()["slug"] == "acme-corp"
    assert second.json()["slug"] == "techstart"

    # A fresh boot resumes on the persisted organization
    rebooted = TenancySessionStore(HttpMembershipSource("http://test", client=async_client), pointer)
    await rebooted.load_memberships(1)
    assert rebooted.current_context().organization.id == techstart.id
    assert rebooted.current_context().role == Role.EMPLOYEE


@pytest.mark.asyncio
async def test_lost_membership_falls_back_on_refresh(async_client, async_db_session, sample_organizations, tmp_path):
    acme, techstart = sample_organizations
    pointer = JsonFilePointerStore(tmp_path / "session.json")
    await pointer.write(techstart.id)

    store = TenancySessionStore(HttpMembershipSource("http://test", client=async_client), pointer)
    await store.load_memberships(1)
    assert store.current_context().organization.id == techstart.id

    await membership_service.remove_member(async_db_session, techstart.id, 1)
    await async_db_session.commit()

    outcome = await store.refresh()

    assert outcome.ok
    assert store.current_context().organization.id == acme.id
    assert store.current_context().role == Role.ADMIN
    assert await pointer.read() == acme.id
