"""Tests for roles, plans and organization schema validation."""
import pytest
from pydantic import ValidationError

from tenancy.core.plans import DEFAULT_FEATURES, Feature, PlanTier, get_plan_limits
from tenancy.core.roles import Capability, Role, ROLE_CAPABILITIES, role_has_capability
from tenancy.schemas.organization import (
    CreateOrganizationRequest,
    OrganizationBasicInfo,
    OrganizationResponse,
    slugify,
)


class TestRoles:

    def test_admin_has_every_capability(self):
        assert ROLE_CAPABILITIES[Role.ADMIN] == frozenset(Capability)

    def test_employee_has_no_capability(self):
        assert all(not role_has_capability(Role.EMPLOYEE, c) for c in Capability)

    @pytest.mark.parametrize("role,capability,expected", [
        (Role.HR, Capability.MANAGE_EMPLOYEES, True),
        (Role.HR, Capability.MANAGE_PROJECTS, False),
        (Role.MANAGER, Capability.APPROVE_LEAVE, True),
        (Role.MANAGER, Capability.MANAGE_MEMBERS, False),
        ("hr", "approve_leave", True),
    ])
    def test_role_capabilities(self, role, capability, expected):
        assert role_has_capability(role, capability) is expected

    def test_unknown_role_is_rejected(self):
        with pytest.raises(ValueError):
            role_has_capability("owner", Capability.VIEW_REPORTS)


class TestPlans:

    def test_limits_per_tier(self):
        assert get_plan_limits(PlanTier.FREE).max_seats == 5
        assert get_plan_limits(PlanTier.BASIC).max_storage_gb == 10
        assert get_plan_limits("professional").max_seats == 50
        assert get_plan_limits(PlanTier.ENTERPRISE).max_seats is None

    def test_default_features_cover_every_feature(self):
        assert set(DEFAULT_FEATURES) == set(Feature)
        assert DEFAULT_FEATURES[Feature.PAYROLL_MANAGEMENT] is True
        assert DEFAULT_FEATURES[Feature.INVOICE_MANAGEMENT] is False


class TestOrganizationSchemas:

    @pytest.mark.parametrize("name,expected", [
        ("Acme Corporation", "acme-corporation"),
        ("  TechStart, Inc. ", "techstart-inc"),
        ("Global--Industries 2024", "global-industries-2024"),
    ])
    def test_slugify(self, name, expected):
        assert slugify(name) == expected

    def test_basic_info_derives_slug(self):
        info = OrganizationBasicInfo(name="Acme Corporation", industry="Manufacturing")

        assert info.slug == "acme-corporation"
        assert info.plan == PlanTier.FREE

    def test_basic_info_requires_sluggable_name(self):
        with pytest.raises(ValidationError):
            OrganizationBasicInfo(name="!!!", industry="Retail")

    def test_basic_info_requires_industry(self):
        with pytest.raises(ValidationError):
            OrganizationBasicInfo(name="Acme")

    def test_enabled_features(self):
        request = CreateOrganizationRequest(
            basic={"name": "Acme", "industry": "Retail"},
            features={"kanban_boards": True, "leave_management": False},
        )

        assert request.enabled_features() == [Feature.KANBAN_BOARDS]

    def test_organization_slug_must_be_url_safe(self):
        with pytest.raises(ValidationError):
            OrganizationResponse(id=1, name="Acme", slug="Acme Corp")

    def test_organization_rejects_unknown_plan(self):
        with pytest.raises(ValidationError):
            OrganizationResponse(id=1, name="Acme", slug="acme", plan="gold")
