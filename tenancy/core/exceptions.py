"""Custom exceptions for the tenancy layer.

The session store never raises these across its public methods; it hands
them back inside typed outcomes so callers can render a degraded view.
Only the API scoping adapter raises (``NoActiveTenant``), because sending
a request without a tenant is never acceptable.
"""
from typing import Optional


class TenancyError(Exception):
    """Base class for tenancy errors.

    Every error carries a stable ``reason`` code that the UI layer can
    switch on without parsing messages.
    """

    def __init__(
        self,
        message: str,
        reason: str,
        original_error: Exception = None
    ):
        super().__init__(message)
        self.reason = reason
        self.original_error = original_error


class MembershipLoadFailed(TenancyError):
    """Raised when the membership source could not produce a list.

    Recoverable: the UI offers a retry and may keep showing the last
    ready context in the meantime.
    """

    def __init__(self, message: str, original_error: Exception = None):
        super().__init__(message, "membership_load_failed", original_error)


class UnauthorizedTenantSwitch(TenancyError):
    """Raised when a switch targets an organization the user is not a member of."""

    def __init__(self, organization_id: int):
        super().__init__(
            f"User is not a member of organization {organization_id}",
            "unauthorized_tenant"
        )
        self.organization_id = organization_id


class TenantBusy(TenancyError):
    """Raised when a switch is attempted while memberships are loading."""

    def __init__(self, message: str = "Memberships are loading, try again once loading completes"):
        super().__init__(message, "tenant_busy")


class InvalidSessionState(TenancyError):
    """Raised when an operation is not valid in the current session state."""

    def __init__(self, state: str, operation: str):
        super().__init__(
            f"Cannot {operation} while session is {state}",
            "invalid_state"
        )
        self.state = state
        self.operation = operation


class NoActiveTenant(TenancyError):
    """Raised by the scoping adapter when no organization is active."""

    def __init__(self, message: Optional[str] = None):
        super().__init__(
            message or "No active organization; refusing to send an unscoped request",
            "no_active_tenant"
        )
