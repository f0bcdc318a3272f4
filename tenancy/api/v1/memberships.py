#!/usr/bin/env python3
import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from tenancy.api.dependencies import (
    get_db,
    get_membership_service,
    require_org_admin,
    require_same_user,
)
from tenancy.services.membership_service import MembershipService
from tenancy.schemas.membership import (
    AssignMemberRequest,
    MembershipRecord,
    MembershipResponse,
)
from tenancy.schemas.common import ErrorResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["memberships"])


@router.get(
    "/users/{user_id}/memberships",
    response_model=List[MembershipRecord],
    responses={
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
    }
)
async def list_user_memberships(
    user_id: int = Depends(require_same_user),
    db: AsyncSession = Depends(get_db),
    service: MembershipService = Depends(get_membership_service)
) -> List[MembershipRecord]:
    """
    List the organizations a user belongs to, with the role held in each.

    Ordered by join date; an empty list means the user has no workspace yet.
    Only the user themselves (``X-User-Id``) may read the list.
    """
    return await service.list_user_memberships(db, user_id)


@router.put(
    "/organizations/{organization_id}/members/{user_id}",
    response_model=MembershipResponse,
    responses={
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    }
)
async def assign_member(
    organization_id: int,
    user_id: int,
    request: AssignMemberRequest,
    _admin_id: int = Depends(require_org_admin),
    db: AsyncSession = Depends(get_db),
    service: MembershipService = Depends(get_membership_service)
) -> MembershipResponse:
    """Add a user to the organization or change their role. Admin only."""
    membership = await service.assign_member(db, organization_id, user_id, request.role)
    if membership is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={
                "error": {
                    "code": "ORGANIZATION_NOT_FOUND",
                    "message": f"Organization {organization_id} not found"
                }
            }
        )
    return membership


@router.delete(
    "/organizations/{organization_id}/members/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    }
)
async def remove_member(
    organization_id: int,
    user_id: int,
    _admin_id: int = Depends(require_org_admin),
    db: AsyncSession = Depends(get_db),
    service: MembershipService = Depends(get_membership_service)
) -> Response:
    """Remove a user from the organization. Admin only."""
    removed = await service.remove_member(db, organization_id, user_id)
    if not removed:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={
                "error": {
                    "code": "MEMBERSHIP_NOT_FOUND",
                    "message": f"User {user_id} is not a member of organization {organization_id}"
                }
            }
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
