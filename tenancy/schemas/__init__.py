from .organization import (
    CreateOrganizationRequest,
    UpdateOrganizationRequest,
    OrganizationResponse,
)
from .membership import MembershipRecord, MembershipResponse, AssignMemberRequest
from .health import HealthCheckResponse
from .common import PaginatedResponse, ErrorResponse

__all__ = [
    "CreateOrganizationRequest",
    "UpdateOrganizationRequest",
    "OrganizationResponse",
    "MembershipRecord",
    "MembershipResponse",
    "AssignMemberRequest",
    "ErrorResponse",
    "HealthCheckResponse",
    "PaginatedResponse"
]
