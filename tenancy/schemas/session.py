#!/usr/bin/env python3
"""Session context snapshot and the typed outcomes of store operations."""
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from tenancy.core.exceptions import TenancyError
from tenancy.core.roles import Role
from tenancy.schemas.membership import MembershipRecord
from tenancy.schemas.organization import OrganizationResponse


class SessionState(str, Enum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"
    EMPTY = "empty"
    ERROR = "error"


@dataclass(frozen=True)
class TenantContext:
    """Immutable (organization, role, memberships) triple.

    Replaced as a whole on every transition, so the organization and the
    role observed by a reader always belong together.
    """

    organization: Optional[OrganizationResponse]
    role: Optional[Role]
    memberships: Tuple[MembershipRecord, ...] = ()

    @property
    def organization_id(self) -> Optional[int]:
        return self.organization.id if self.organization else None

    @property
    def has_workspace(self) -> bool:
        return self.organization is not None


NO_CONTEXT = TenantContext(organization=None, role=None, memberships=())


@dataclass(frozen=True)
class LoadOutcome:
    """Result of loading memberships."""

    state: SessionState
    context: TenantContext
    error: Optional[TenancyError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class SwitchOutcome:
    """Result of a switch request. ``error`` is set when the switch was rejected."""

    context: TenantContext
    switched: bool = False
    error: Optional[TenancyError] = None

    @property
    def ok(self) -> bool:
        return self.error is None
