#!/usr/bin/env python3
import logging
from typing import Optional, List
from fastapi import HTTPException
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from tenancy.core.roles import Role
from tenancy.models.membership import Membership
from tenancy.models.organization import Organization
from tenancy.schemas.membership import MembershipRecord, MembershipResponse
from tenancy.schemas.organization import OrganizationResponse

logger = logging.getLogger(__name__)


class MembershipService:
    """Service layer for user/organization/role memberships."""

    async def _guard_last_admin(self, db: AsyncSession, membership: Membership) -> None:
        """Raise 409 when ``membership`` is the only admin left in its organization."""
        if membership.role != Role.ADMIN.value:
            return
        admins = await db.scalar(
            select(func.count(Membership.id)).where(
                Membership.organization_id == membership.organization_id,
                Membership.role == Role.ADMIN.value,
            )
        )
        if admins <= 1:
            raise HTTPException(
                status_code=409,
                detail={
                    "error": {
                        "code": "LAST_ADMIN",
                        "message": (
                            f"User {membership.user_id} is the last admin of organization "
                            f"{membership.organization_id}"
                        )
                    }
                }
            )

    async def list_user_memberships(
        self,
        db: AsyncSession,
        user_id: int
    ) -> List[MembershipRecord]:
        """
        List a user's memberships in join order.

        This is the upstream contract consumed by the session store; it is
        read-only and idempotent.
        """
        query = (
            select(Membership)
            .options(selectinload(Membership.organization))
            .where(Membership.user_id == user_id)
            .order_by(Membership.joined_at, Membership.organization_id)
        )
        result = await db.execute(query)
        return [
            MembershipRecord(
                organization=OrganizationResponse.model_validate(m.organization),
                role=m.role,
                joined_at=m.joined_at,
            )
            for m in result.scalars().all()
        ]

    async def get_role(
        self,
        db: AsyncSession,
        user_id: int,
        organization_id: int
    ) -> Optional[Role]:
        result = await db.execute(
            select(Membership.role).where(
                Membership.user_id == user_id,
                Membership.organization_id == organization_id,
            )
        )
        role = result.scalar_one_or_none()
        return Role(role) if role is not None else None

    async def assign_member(
        self,
        db: AsyncSession,
        organization_id: int,
        user_id: int,
        role: Role
    ) -> Optional[MembershipResponse]:
        """
        Add a user to an organization, or change their role there.

        Returns:
            Membership response, or None if the organization does not exist

        Raises:
            HTTPException: 409 when the change would demote the last admin
        """
        if await db.get(Organization, organization_id) is None:
            return None

        result = await db.execute(
            select(Membership).where(
                Membership.user_id == user_id,
                Membership.organization_id == organization_id,
            )
        )
        membership = result.scalar_one_or_none()
        if membership is None:
            membership = Membership(
                user_id=user_id,
                organization_id=organization_id,
                role=Role(role).value,
            )
            db.add(membership)
            logger.info(f"User {user_id} joined organization {organization_id} as {Role(role).value}")
        else:
            if Role(role) != Role.ADMIN:
                await self._guard_last_admin(db, membership)
            logger.info(
                f"User {user_id} role in organization {organization_id}: "
                f"{membership.role} -> {Role(role).value}"
            )
            membership.role = Role(role).value

        await db.flush()
        await db.refresh(membership)
        return MembershipResponse.model_validate(membership)

    async def remove_member(
        self,
        db: AsyncSession,
        organization_id: int,
        user_id: int
    ) -> bool:
        """Remove a membership; the last admin of an organization cannot be removed."""
        result = await db.execute(
            select(Membership).where(
                Membership.user_id == user_id,
                Membership.organization_id == organization_id,
            )
        )
        membership = result.scalar_one_or_none()
        if membership is None:
            return False

        await self._guard_last_admin(db, membership)
        await db.delete(membership)
        await db.flush()
        logger.info(f"User {user_id} removed from organization {organization_id}")
        return True


membership_service = MembershipService()
