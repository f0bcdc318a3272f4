#!/usr/bin/env python3
"""Membership sources: where the session store gets a user's memberships.

Every source implements ``fetch_memberships(user_id)`` and must be
idempotent and side-effect free. Failures of any kind surface as
``MembershipLoadFailed``.
"""
import logging
from typing import Dict, List, Optional, Protocol, Sequence

import httpx
from pydantic import TypeAdapter, ValidationError
from sqlalchemy.exc import SQLAlchemyError

from tenancy.core.exceptions import MembershipLoadFailed
from tenancy.schemas.membership import MembershipRecord
from tenancy.services.membership_service import membership_service

logger = logging.getLogger(__name__)

_records_adapter = TypeAdapter(List[MembershipRecord])


class MembershipSource(Protocol):
    """Port for fetching the organizations a user belongs to."""

    async def fetch_memberships(self, user_id: int) -> List[MembershipRecord]:
        ...


class StaticMembershipSource:
    """Deterministic in-memory source, used for demos and tests.

    ``fail_with`` makes every fetch raise, to exercise the error path.
    """

    def __init__(
        self,
        records_by_user: Optional[Dict[int, Sequence[MembershipRecord]]] = None,
        fail_with: Optional[Exception] = None
    ):
        self.records_by_user = {
            user_id: list(records) for user_id, records in (records_by_user or {}).items()
        }
        self.fail_with = fail_with
        self.calls = 0

    def set_memberships(self, user_id: int, records: Sequence[MembershipRecord]) -> None:
        self.records_by_user[user_id] = list(records)

    async def fetch_memberships(self, user_id: int) -> List[MembershipRecord]:
        self.calls += 1
        if self.fail_with is not None:
            raise MembershipLoadFailed(
                f"Failed to load memberships for user {user_id}",
                original_error=self.fail_with
            )
        return list(self.records_by_user.get(user_id, []))


class HttpMembershipSource:
    """Fetches memberships from ``GET {base_url}/api/v1/users/{user_id}/memberships``."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        api_prefix: str = "/api/v1",
        client: Optional[httpx.AsyncClient] = None
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.api_prefix = api_prefix
        self._client = client

    async def fetch_memberships(self, user_id: int) -> List[MembershipRecord]:
        url = f"{self.base_url}{self.api_prefix}/users/{user_id}/memberships"
        # The endpoint only serves a user's own memberships
        headers = {"X-User-Id": str(user_id)}
        try:
            if self._client is not None:
                response = await self._client.get(url, headers=headers, timeout=self.timeout)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.get(url, headers=headers)
            response.raise_for_status()
            return _records_adapter.validate_python(response.json())
        except httpx.TimeoutException as e:
            logger.error(f"Membership request timed out for user {user_id}: {e}")
            raise MembershipLoadFailed(f"Membership request timed out after {self.timeout}s", e)
        except httpx.HTTPStatusError as e:
            logger.error(f"Membership request failed for user {user_id}: HTTP {e.response.status_code}")
            raise MembershipLoadFailed(
                f"Membership service returned HTTP {e.response.status_code}", e
            )
        except httpx.HTTPError as e:
            logger.error(f"Membership request failed for user {user_id}: {e}")
            raise MembershipLoadFailed(f"Membership service unreachable: {e}", e)
        except (ValueError, ValidationError) as e:
            logger.error(f"Invalid membership payload for user {user_id}: {e}")
            raise MembershipLoadFailed("Membership service returned an invalid payload", e)


class DatabaseMembershipSource:
    """Reads memberships straight from the organizations database."""

    def __init__(self, session_factory=None):
        if session_factory is None:
            from tenancy.core.database import AsyncSessionLocal
            session_factory = AsyncSessionLocal
        self.session_factory = session_factory

    async def fetch_memberships(self, user_id: int) -> List[MembershipRecord]:
        try:
            async with self.session_factory() as db:
                return await membership_service.list_user_memberships(db, user_id)
        except (SQLAlchemyError, ValidationError) as e:
            logger.error(f"Database membership lookup failed for user {user_id}: {e}")
            raise MembershipLoadFailed(f"Failed to load memberships for user {user_id}", e)
