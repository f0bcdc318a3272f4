#!/usr/bin/env python3
"""Demo organizations and memberships used by the seed command."""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class OrganizationSeed:
    """Seed data for a single organization."""
    name: str
    slug: str
    plan: str
    industry: str
    settings: Dict[str, Any]
    branding: Dict[str, Any]
    custom_domain: Optional[str] = None
    features: List[str] = field(default_factory=list)


@dataclass
class MembershipSeed:
    user_id: int
    slug: str
    role: str
    joined_at: str


DEMO_ORGANIZATIONS: List[OrganizationSeed] = [
    OrganizationSeed(
        name="Acme Corporation",
        slug="acme-corp",
        plan="professional",
        industry="Manufacturing",
        custom_domain="app.acmecorp.com",
        settings={"timezone": "America/New_York", "date_format": "MM/DD/YYYY", "currency": "USD"},
        branding={
            "primary_color": "#007bff",
            "secondary_color": "#6c757d",
            "accent_color": "#28a745",
            "theme_mode": "light",
            "company_name_display": "Acme Corp",
        },
        features=["employee_management", "leave_management", "invoice_management"],
    ),
    OrganizationSeed(
        name="TechStart Inc",
        slug="techstart",
        plan="enterprise",
        industry="Technology",
        settings={"timezone": "America/Los_Angeles", "date_format": "MM/DD/YYYY", "currency": "USD"},
        branding={
            "primary_color": "#dc3545",
            "secondary_color": "#6c757d",
            "accent_color": "#ffc107",
            "theme_mode": "dark",
            "company_name_display": "TechStart Inc",
        },
        features=["employee_management", "project_management", "kanban_boards"],
    ),
    OrganizationSeed(
        name="Global Industries",
        slug="global-industries",
        plan="basic",
        industry="Logistics",
        settings={"timezone": "Europe/London", "date_format": "DD/MM/YYYY", "currency": "GBP"},
        branding={
            "primary_color": "#007bff",
            "secondary_color": "#6c757d",
            "accent_color": "#28a745",
            "theme_mode": "auto",
            "company_name_display": "Global Industries",
        },
        features=["employee_management", "attendance_tracking"],
    ),
]

DEMO_MEMBERSHIPS: List[MembershipSeed] = [
    MembershipSeed(user_id=1, slug="acme-corp", role="admin", joined_at="2024-01-15T10:00:00+00:00"),
    MembershipSeed(user_id=1, slug="techstart", role="manager", joined_at="2024-03-25T11:00:00+00:00"),
    MembershipSeed(user_id=1, slug="global-industries", role="employee", joined_at="2024-07-01T08:00:00+00:00"),
]
