#!/usr/bin/env python3
"""Membership roles and the capabilities each role grants.

Capabilities are evaluated against the role held in the *active*
organization only.
"""
from enum import Enum
from typing import Dict, FrozenSet


class Role(str, Enum):
    """Role of a user within one organization."""
    EMPLOYEE = "employee"
    MANAGER = "manager"
    HR = "hr"
    ADMIN = "admin"


class Capability(str, Enum):
    """Role-gated actions used to decide which views are rendered."""
    MANAGE_ORGANIZATION = "manage_organization"
    MANAGE_MEMBERS = "manage_members"
    MANAGE_EMPLOYEES = "manage_employees"
    APPROVE_LEAVE = "approve_leave"
    VIEW_REPORTS = "view_reports"
    MANAGE_PROJECTS = "manage_projects"


ROLE_CAPABILITIES: Dict[Role, FrozenSet[Capability]] = {
    Role.EMPLOYEE: frozenset(),
    Role.MANAGER: frozenset({
        Capability.APPROVE_LEAVE,
        Capability.VIEW_REPORTS,
        Capability.MANAGE_PROJECTS,
    }),
    Role.HR: frozenset({
        Capability.MANAGE_EMPLOYEES,
        Capability.APPROVE_LEAVE,
        Capability.VIEW_REPORTS,
    }),
    Role.ADMIN: frozenset(Capability),
}


def role_has_capability(role: Role, capability: Capability) -> bool:
    """Check whether a role grants a capability."""
    return Capability(capability) in ROLE_CAPABILITIES[Role(role)]
