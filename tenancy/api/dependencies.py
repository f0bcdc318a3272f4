#!/usr/bin/env python3
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Header, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from tenancy.core.config import settings
from tenancy.core.database import get_db
from tenancy.core.roles import Role
from tenancy.services.organization_service import organization_service
from tenancy.services.membership_service import membership_service


async def get_organization_service():
    """Dependency for getting the organization service."""
    return organization_service


async def get_membership_service():
    """Dependency for getting the membership service."""
    return membership_service


async def get_current_user_id(
    x_user_id: Optional[int] = Header(None, alias="X-User-Id")
) -> int:
    """Acting user id, set by the authenticating proxy."""
    if x_user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "error": {
                    "code": "MISSING_USER",
                    "message": "X-User-Id header is required"
                }
            }
        )
    return x_user_id


@dataclass(frozen=True)
class RequestTenant:
    """Organization a request is scoped to, and the caller's role there."""
    organization_id: int
    user_id: int
    role: Role


async def _member_role(db: AsyncSession, user_id: int, organization_id: int) -> Role:
    role = await membership_service.get_role(db, user_id, organization_id)
    if role is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={
                "error": {
                    "code": "UNAUTHORIZED_TENANT",
                    "message": f"User {user_id} is not a member of organization {organization_id}"
                }
            }
        )
    return role


def _scoped_organization_id(request: Request) -> Optional[int]:
    """Organization id from the configured scoping header, else the query param."""
    raw = request.headers.get(settings.tenant_header)
    if not raw:
        raw = request.query_params.get(settings.tenant_query_param)
    try:
        return int(raw) if raw else None
    except ValueError:
        return None


async def require_tenant(
    request: Request,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
) -> RequestTenant:
    """
    Resolve the organization attached by the API scoping adapter.

    Reads ``settings.tenant_header`` first and falls back to
    ``settings.tenant_query_param``, matching either adapter mode.

    Raises:
        HTTPException: 400 when no valid organization id is attached,
            403 when the caller is not a member of that organization
    """
    organization_id = _scoped_organization_id(request)
    if organization_id is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "error": {
                    "code": "MISSING_TENANT",
                    "message": (
                        f"{settings.tenant_header} header or {settings.tenant_query_param} "
                        f"query parameter must carry an organization id"
                    )
                }
            }
        )

    role = await _member_role(db, user_id, organization_id)
    return RequestTenant(organization_id=organization_id, user_id=user_id, role=role)


async def require_org_member(
    organization_id: int,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
) -> RequestTenant:
    """Ensure the acting user belongs to the path organization."""
    role = await _member_role(db, user_id, organization_id)
    return RequestTenant(organization_id=organization_id, user_id=user_id, role=role)


async def require_same_user(
    user_id: int,
    acting_user_id: int = Depends(get_current_user_id)
) -> int:
    """Memberships of a user are only readable by that user."""
    if acting_user_id != user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={
                "error": {
                    "code": "FORBIDDEN_USER",
                    "message": f"User {acting_user_id} cannot read memberships of user {user_id}"
                }
            }
        )
    return user_id


async def require_org_admin(
    organization_id: int,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
) -> int:
    """Ensure the acting user holds the admin role in the path organization."""
    role = await membership_service.get_role(db, user_id, organization_id)
    if role != Role.ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={
                "error": {
                    "code": "ADMIN_REQUIRED",
                    "message": f"Admin role in organization {organization_id} is required"
                }
            }
        )
    return user_id


# Re-export get_db for convenience
__all__ = [
    "get_db",
    "get_organization_service",
    "get_membership_service",
    "get_current_user_id",
    "require_tenant",
    "require_org_member",
    "require_same_user",
    "require_org_admin",
    "RequestTenant",
]
