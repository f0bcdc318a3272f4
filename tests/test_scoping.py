"""Tests for the API scoping adapter."""
import asyncio
from types import SimpleNamespace

import httpx
import pytest

from tenancy.core.exceptions import NoActiveTenant
from tenancy.session.scoping import TenantScopedAuth, scoped_client
from tenancy.session.store import TenancySessionStore

from conftest import GatedSource


def recording_transport(captured):
    def handler(request: httpx.Request):
        captured.append(request)
        return httpx.Response(200, json={"ok": True})

    return httpx.MockTransport(handler)


class TestTenantScopedAuth:

    @pytest.mark.asyncio
    async def test_header_carries_active_organization(self, store):
        await store.load_memberships(1)
        captured = []
        auth = TenantScopedAuth(store, header="X-Company-Id")

        async with httpx.AsyncClient(auth=auth, transport=recording_transport(captured)) as client:
            await client.get("http://api.local/employees")

        assert captured[0].headers["X-Company-Id"] == "1"
        assert "company_id" not in captured[0].url.params

    @pytest.mark.asyncio
    async def test_query_param_mode_keeps_existing_params(self, store):
        await store.load_memberships(1)
        captured = []
        auth = TenantScopedAuth(store, header=None, query_param="company_id")

        async with httpx.AsyncClient(auth=auth, transport=recording_transport(captured)) as client:
            await client.get("http://api.local/invoices", params={"status": "open"})

        params = captured[0].url.params
        assert params["company_id"] == "1"
        assert params["status"] == "open"
        assert "X-Company-Id" not in captured[0].headers

    @pytest.mark.asyncio
    async def test_switch_applies_to_next_request(self, store):
        await store.load_memberships(1)
        captured = []
        auth = TenantScopedAuth(store)

        async with httpx.AsyncClient(auth=auth, transport=recording_transport(captured)) as client:
            await client.get("http://api.local/leave")
            await store.switch_to(2)
            await client.get("http://api.local/leave")

        assert [r.headers["X-Company-Id"] for r in captured] == ["1", "2"]

    @pytest.mark.asyncio
    async def test_unscoped_request_is_never_sent(self, store):
        captured = []
        auth = TenantScopedAuth(store)

        async with httpx.AsyncClient(auth=auth, transport=recording_transport(captured)) as client:
            with pytest.raises(NoActiveTenant):
                await client.get("http://api.local/employees")

        assert captured == []

    @pytest.mark.asyncio
    async def test_empty_session_is_never_scoped(self, store):
        await store.load_memberships(7)
        auth = TenantScopedAuth(store)

        async with httpx.AsyncClient(auth=auth, transport=recording_transport([])) as client:
            with pytest.raises(NoActiveTenant):
                await client.get("http://api.local/employees")

    @pytest.mark.asyncio
    async def test_request_during_refresh_keeps_previous_organization(self, two_memberships, pointer_store):
        source = GatedSource(two_memberships)
        source.release.set()
        store = TenancySessionStore(source, pointer_store)
        await store.load_memberships(1)
        await store.switch_to(2)
        captured = []

        source.hold()
        reload = asyncio.create_task(store.refresh())
        await source.started.wait()
        async with httpx.AsyncClient(auth=TenantScopedAuth(store), transport=recording_transport(captured)) as client:
            await client.get("http://api.local/attendance")
        source.release.set()
        await reload

        assert captured[0].headers["X-Company-Id"] == "2"

    def test_requires_header_or_query_param(self, store):
        with pytest.raises(ValueError):
            TenantScopedAuth(store, header=None, query_param=None)


class TestScopedClient:

    @pytest.mark.asyncio
    async def test_uses_configured_scoping(self, store):
        await store.load_memberships(1)
        captured = []
        settings = SimpleNamespace(
            tenant_header="X-Tenant",
            tenant_query_param="tenant",
            scope_with_header=True,
            scope_with_query=True,
        )

        async with scoped_client(store, settings=settings, transport=recording_transport(captured)) as client:
            await client.get("http://api.local/projects")

        assert captured[0].headers["X-Tenant"] == "1"
        assert captured[0].url.params["tenant"] == "1"
