#!/usr/bin/env python3
import logging
from typing import Optional, Tuple, List
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
from fastapi import HTTPException

from tenancy.core.roles import Role
from tenancy.core.plans import PlanTier
from tenancy.models.organization import Organization
from tenancy.models.membership import Membership
from tenancy.schemas.organization import (
    Branding,
    CreateOrganizationRequest,
    OrganizationResponse,
    OrganizationSettings,
    UpdateOrganizationRequest,
)

logger = logging.getLogger(__name__)


class OrganizationService:
    """Service layer for organization business logic."""

    def _to_response(self, organization: Organization) -> OrganizationResponse:
        return OrganizationResponse.model_validate(organization)

    async def create_organization(
        self,
        db: AsyncSession,
        request: CreateOrganizationRequest,
        creator_user_id: Optional[int] = None
    ) -> OrganizationResponse:
        """
        Create an organization from the two-step wizard payload.

        The creator, when given, joins the new organization as admin.

        Args:
            db: Database session
            request: Wizard payload (basic info + feature toggles)
            creator_user_id: User creating the organization

        Returns:
            Created organization response

        Raises:
            HTTPException: 409 if the slug is already taken
        """
        basic = request.basic
        org_settings = request.settings or OrganizationSettings(timezone=basic.timezone)

        organization = Organization(
            name=basic.name,
            slug=basic.slug,
            plan=basic.plan.value,
            industry=basic.industry,
            domain=basic.slug,
            settings=org_settings.model_dump(),
            branding=(request.branding or Branding()).model_dump(),
            features=[feature.value for feature in request.enabled_features()],
        )
        db.add(organization)

        try:
            await db.flush()
            if creator_user_id is not None:
                db.add(Membership(
                    user_id=creator_user_id,
                    organization_id=organization.id,
                    role=Role.ADMIN.value,
                ))
                await db.flush()
            await db.refresh(organization)
        except IntegrityError as e:
            await db.rollback()
            if "slug" in str(e).lower() or "unique" in str(e).lower():
                raise HTTPException(
                    status_code=409,
                    detail={
                        "error": {
                            "code": "DUPLICATE_SLUG",
                            "message": f"Organization with slug '{basic.slug}' already exists"
                        }
                    }
                )
            raise

        logger.info(
            f"Created organization: {organization.id} ({organization.slug}) "
            f"with {len(organization.features)} features enabled"
        )
        return self._to_response(organization)

    async def get_organization(
        self,
        db: AsyncSession,
        organization_id: int
    ) -> Optional[OrganizationResponse]:
        organization = await db.get(Organization, organization_id)
        if organization is None:
            return None
        return self._to_response(organization)

    async def list_organizations(
        self,
        db: AsyncSession,
        member_user_id: Optional[int] = None,
        plan: Optional[PlanTier] = None,
        is_active: Optional[bool] = None,
        page: int = 1,
        limit: int = 20
    ) -> Tuple[List[OrganizationResponse], int]:
        """
        List organizations with filtering and pagination.

        With ``member_user_id`` only organizations that user belongs to are
        listed.

        Returns:
            Tuple of (organization list, total count)
        """
        query = select(Organization)
        if member_user_id is not None:
            query = query.join(Membership).where(Membership.user_id == member_user_id)
        if plan:
            query = query.where(Organization.plan == PlanTier(plan).value)
        if is_active is not None:
            query = query.where(Organization.is_active == is_active)

        count_result = await db.execute(select(func.count()).select_from(query.subquery()))
        total = count_result.scalar_one()

        query = query.order_by(Organization.id).offset((page - 1) * limit).limit(limit)
        result = await db.execute(query)
        organizations = result.scalars().all()

        return [self._to_response(o) for o in organizations], total

    async def update_organization(
        self,
        db: AsyncSession,
        organization_id: int,
        request: UpdateOrganizationRequest
    ) -> Optional[OrganizationResponse]:
        """
        Update mutable organization fields.

        Settings and branding are owned by the settings collaborator and are
        not updated here.
        """
        organization = await db.get(Organization, organization_id)
        if organization is None:
            return None

        updates = request.model_dump(exclude_unset=True, exclude_none=True)
        if "plan" in updates:
            updates["plan"] = PlanTier(updates["plan"]).value
        if "features" in updates:
            updates["features"] = [getattr(f, "value", f) for f in updates["features"]]
        for field, value in updates.items():
            setattr(organization, field, value)

        await db.flush()
        await db.refresh(organization)
        logger.info(f"Updated organization {organization_id}: {sorted(updates)}")
        return self._to_response(organization)


organization_service = OrganizationService()
