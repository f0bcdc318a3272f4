#!/usr/bin/env python3
from datetime import datetime
from typing import Optional
from pydantic import BaseModel

from tenancy.core.roles import Role
from tenancy.schemas.organization import OrganizationResponse


class MembershipRecord(BaseModel):
    """One entry of the upstream membership contract."""
    organization: OrganizationResponse
    role: Role
    joined_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class MembershipResponse(BaseModel):
    user_id: int
    organization_id: int
    role: Role
    joined_at: datetime

    class Config:
        from_attributes = True


class AssignMemberRequest(BaseModel):
    role: Role = Role.EMPLOYEE
