#!/usr/bin/env python3
import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from tenancy.api.dependencies import (
    RequestTenant,
    get_db,
    get_current_user_id,
    get_organization_service,
    require_org_admin,
    require_org_member,
    require_tenant,
)
from tenancy.core.plans import PlanTier, PlanLimits, get_plan_limits
from tenancy.services.organization_service import OrganizationService
from tenancy.schemas.organization import (
    CreateOrganizationRequest,
    UpdateOrganizationRequest,
    OrganizationResponse,
)
from tenancy.schemas.common import ErrorResponse, PaginatedResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/organizations", tags=["organizations"])


def _not_found(organization_id: int) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail={
            "error": {
                "code": "ORGANIZATION_NOT_FOUND",
                "message": f"Organization {organization_id} not found"
            }
        }
    )


@router.post(
    "",
    response_model=OrganizationResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        401: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    }
)
async def create_organization(
    request: CreateOrganizationRequest,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
    service: OrganizationService = Depends(get_organization_service)
) -> OrganizationResponse:
    """
    Create an organization (two-step wizard).

    - **basic**: name, slug (derived from the name when omitted), industry, plan, timezone
    - **features**: feature toggles selected in step two
    - The calling user becomes the organization's admin
    """
    try:
        return await service.create_organization(db, request, creator_user_id=user_id)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error creating organization: {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "error": {
                    "code": "CREATE_FAILED",
                    "message": "Failed to create organization",
                    "details": str(e)
                }
            }
        )


@router.get(
    "",
    response_model=PaginatedResponse[OrganizationResponse],
    responses={401: {"model": ErrorResponse}}
)
async def list_organizations(
    plan: Optional[PlanTier] = Query(None, description="Filter by plan tier"),
    is_active: Optional[bool] = Query(None, description="Filter by active flag"),
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(20, ge=1, le=100, description="Items per page"),
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
    service: OrganizationService = Depends(get_organization_service)
) -> PaginatedResponse[OrganizationResponse]:
    """List the acting user's organizations with optional filtering and pagination."""
    organizations, total = await service.list_organizations(
        db=db,
        member_user_id=user_id,
        plan=plan,
        is_active=is_active,
        page=page,
        limit=page_size
    )
    return PaginatedResponse(
        items=organizations,
        total=total,
        page=page,
        page_size=page_size
    )


@router.get(
    "/current",
    response_model=OrganizationResponse,
    responses={
        400: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
    }
)
async def get_current_organization(
    tenant: RequestTenant = Depends(require_tenant),
    db: AsyncSession = Depends(get_db),
    service: OrganizationService = Depends(get_organization_service)
) -> OrganizationResponse:
    """Organization named by the scoping header or query parameter."""
    organization = await service.get_organization(db, tenant.organization_id)
    if organization is None:
        raise _not_found(tenant.organization_id)
    return organization


@router.get(
    "/{organization_id}",
    response_model=OrganizationResponse,
    responses={
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    }
)
async def get_organization(
    organization_id: int,
    _member: RequestTenant = Depends(require_org_member),
    db: AsyncSession = Depends(get_db),
    service: OrganizationService = Depends(get_organization_service)
) -> OrganizationResponse:
    organization = await service.get_organization(db, organization_id)
    if organization is None:
        raise _not_found(organization_id)
    return organization


@router.get(
    "/{organization_id}/limits",
    response_model=PlanLimits,
    responses={
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    }
)
async def get_organization_limits(
    organization_id: int,
    _member: RequestTenant = Depends(require_org_member),
    db: AsyncSession = Depends(get_db),
    service: OrganizationService = Depends(get_organization_service)
) -> PlanLimits:
    """Seat and storage limits of the organization's plan (enforced elsewhere)."""
    organization = await service.get_organization(db, organization_id)
    if organization is None:
        raise _not_found(organization_id)
    return get_plan_limits(organization.plan)


@router.patch(
    "/{organization_id}",
    response_model=OrganizationResponse,
    responses={
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    }
)
async def update_organization(
    organization_id: int,
    request: UpdateOrganizationRequest,
    _admin_id: int = Depends(require_org_admin),
    db: AsyncSession = Depends(get_db),
    service: OrganizationService = Depends(get_organization_service)
) -> OrganizationResponse:
    """Update an organization. Requires the admin role in that organization."""
    organization = await service.update_organization(db, organization_id, request)
    if organization is None:
        raise _not_found(organization_id)
    return organization
