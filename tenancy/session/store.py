#!/usr/bin/env python3
"""
Tenancy session store.

Single source of truth for which organization is active in a session and
which role the user holds there. One store object is created per user
session and handed to whoever needs it; there is no module-level state.

State machine:

    uninitialized -> loading -> ready | empty | error
    ready(org1)   -> ready(org2)        (switch_to, member org)
    ready(org1)   -> ready(org1)        (switch_to, rejected)

Public methods never raise tenancy errors; they return ``LoadOutcome`` or
``SwitchOutcome`` values carrying the error instead.
"""
import asyncio
import logging
from typing import Callable, List, Optional

from tenancy.core.exceptions import (
    TenancyError,
    MembershipLoadFailed,
    UnauthorizedTenantSwitch,
    TenantBusy,
    InvalidSessionState,
)
from tenancy.core.roles import Capability, Role, role_has_capability
from tenancy.schemas.membership import MembershipRecord
from tenancy.schemas.session import (
    NO_CONTEXT,
    LoadOutcome,
    SessionState,
    SwitchOutcome,
    TenantContext,
)
from tenancy.session.persistence import PointerStore
from tenancy.session.sources import MembershipSource

logger = logging.getLogger(__name__)

# Called with the new context after every successful switch or load
ContextListener = Callable[[TenantContext], None]


class TenancySessionStore:
    """Holds memberships, the active organization and the role there."""

    def __init__(
        self,
        source: MembershipSource,
        pointer_store: PointerStore,
        listeners: Optional[List[ContextListener]] = None
    ):
        self.source = source
        self.pointer_store = pointer_store
        self._listeners: List[ContextListener] = list(listeners or [])
        self._state = SessionState.UNINITIALIZED
        self._context = NO_CONTEXT
        self._last_ready: Optional[TenantContext] = None
        self._reload_snapshot: Optional[TenantContext] = None
        self._last_error: Optional[TenancyError] = None
        self._user_id: Optional[int] = None
        self._load_lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def user_id(self) -> Optional[int]:
        return self._user_id

    @property
    def last_error(self) -> Optional[TenancyError]:
        return self._last_error

    @property
    def last_ready(self) -> Optional[TenantContext]:
        """Last ready context, kept through a failed reload for stale-but-valid views."""
        return self._last_ready

    def current_context(self) -> TenantContext:
        """
        Return the (organization, role, memberships) triple.

        While the same user's memberships are reloaded the previous ready
        context is served unchanged. Otherwise, outside ``ready`` the
        organization and role are None; callers must treat that as "no
        workspace" rather than assume a default.
        """
        if self._state == SessionState.LOADING and self._reload_snapshot is not None:
            return self._reload_snapshot
        if self._state != SessionState.READY:
            return TenantContext(organization=None, role=None, memberships=self._context.memberships)
        return self._context

    def role_for(self, organization_id: int) -> Optional[Role]:
        record = self._find(self._context.memberships, organization_id)
        return record.role if record else None

    def has_capability(self, capability: Capability) -> bool:
        """Check a role-gated capability against the active organization only."""
        context = self.current_context()
        if context.role is None:
            return False
        return role_has_capability(context.role, capability)

    def subscribe(self, listener: ContextListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: ContextListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def load_memberships(self, user_id: int) -> LoadOutcome:
        """
        Fetch the user's memberships and resolve the active organization.

        Resolution order: the persisted ``lastCompanyId`` when the user is
        still a member there, otherwise the first membership in list order.
        A stale pointer is overwritten with the resolved id.

        Args:
            user_id: User whose memberships are loaded

        Returns:
            LoadOutcome with the resulting state and context; ``error`` is a
            MembershipLoadFailed when the source failed
        """
        async with self._load_lock:
            previous_state = self._state
            # A reload of the same user keeps serving the ready context until it settles
            if previous_state == SessionState.READY and self._user_id == user_id:
                self._reload_snapshot = self._context
            else:
                self._reload_snapshot = None
            self._user_id = user_id
            self._state = SessionState.LOADING
            logger.debug(f"Loading memberships for user {user_id} (was {previous_state.value})")

            try:
                records = await self.source.fetch_memberships(user_id)
                memberships = self._validate_memberships(user_id, records)
            except MembershipLoadFailed as e:
                return self._fail_load(user_id, e)
            except Exception as e:
                return self._fail_load(
                    user_id,
                    MembershipLoadFailed(f"Failed to load memberships for user {user_id}: {e}", e)
                )

            if not memberships:
                self._context = NO_CONTEXT
                self._state = SessionState.EMPTY
                self._reload_snapshot = None
                self._last_error = None
                logger.info(f"User {user_id} has no memberships")
                self._notify(self._context)
                return LoadOutcome(state=self._state, context=self.current_context())

            persisted_id = await self._read_pointer()
            selected = self._find(memberships, persisted_id) if persisted_id is not None else None
            if selected is None:
                selected = memberships[0]
                if persisted_id is not None:
                    logger.warning(
                        f"Persisted organization {persisted_id} is not a membership of user {user_id}, "
                        f"falling back to {selected.organization.id}"
                    )
                    await self._write_pointer(selected.organization.id)

            self._context = TenantContext(
                organization=selected.organization,
                role=selected.role,
                memberships=memberships,
            )
            self._last_ready = self._context
            self._last_error = None
            self._reload_snapshot = None
            self._state = SessionState.READY
            logger.info(
                f"Session ready for user {user_id}: organization={selected.organization.id} "
                f"role={selected.role.value} ({len(memberships)} memberships)"
            )
            self._notify(self._context)
            return LoadOutcome(state=self._state, context=self._context)

    async def refresh(self) -> LoadOutcome:
        """Reload memberships for the user of the last load."""
        if self._user_id is None:
            error = InvalidSessionState(self._state.value, "refresh")
            return LoadOutcome(state=self._state, context=self.current_context(), error=error)
        return await self.load_memberships(self._user_id)

    async def switch_to(self, organization_id: int) -> SwitchOutcome:
        """
        Make ``organization_id`` the active organization.

        Only valid in ``ready``. A non-member id, a switch during a load or a
        switch from any other state is rejected and leaves the context
        unchanged.

        Args:
            organization_id: Target organization

        Returns:
            SwitchOutcome; ``switched`` is False for rejections and for a
            switch to the already active organization
        """
        if self._state == SessionState.LOADING or self._load_lock.locked():
            return self._reject(TenantBusy())
        if self._state != SessionState.READY:
            return self._reject(InvalidSessionState(self._state.value, "switch organization"))

        record = self._find(self._context.memberships, organization_id)
        if record is None:
            return self._reject(UnauthorizedTenantSwitch(organization_id))

        if record.organization.id == self._context.organization_id:
            return SwitchOutcome(context=self._context, switched=False)

        # Single assignment: readers never see a mismatched org/role pair
        previous_id = self._context.organization_id
        self._context = TenantContext(
            organization=record.organization,
            role=record.role,
            memberships=self._context.memberships,
        )
        self._last_ready = self._context
        logger.info(
            f"User {self._user_id} switched organization {previous_id} -> {organization_id} "
            f"(role={record.role.value})"
        )

        await self._write_pointer(organization_id)
        self._notify(self._context)
        return SwitchOutcome(context=self._context, switched=True)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _find(memberships, organization_id) -> Optional[MembershipRecord]:
        if organization_id is None:
            return None
        for record in memberships:
            if record.organization.id == organization_id:
                return record
        return None

    @staticmethod
    def _validate_memberships(user_id: int, records) -> tuple:
        seen = set()
        for record in records:
            org_id = record.organization.id
            if org_id in seen:
                raise MembershipLoadFailed(
                    f"Membership source returned organization {org_id} twice for user {user_id}"
                )
            seen.add(org_id)
        return tuple(records)

    def _fail_load(self, user_id: int, error: MembershipLoadFailed) -> LoadOutcome:
        self._state = SessionState.ERROR
        self._reload_snapshot = None
        self._last_error = error
        logger.error(f"Membership load failed for user {user_id}: {error}")
        return LoadOutcome(state=self._state, context=self.current_context(), error=error)

    def _reject(self, error: TenancyError) -> SwitchOutcome:
        logger.warning(f"Organization switch rejected ({error.reason}): {error}")
        return SwitchOutcome(context=self.current_context(), switched=False, error=error)

    async def _read_pointer(self) -> Optional[int]:
        try:
            return await self.pointer_store.read()
        except Exception as e:
            logger.error(f"Could not read session pointer: {e}")
            return None

    async def _write_pointer(self, organization_id: int) -> None:
        # The in-memory context is authoritative; a failed write only loses
        # the preference for the next boot
        try:
            await self.pointer_store.write(organization_id)
        except Exception as e:
            logger.error(f"Could not persist session pointer {organization_id}: {e}")

    def _notify(self, context: TenantContext) -> None:
        for listener in list(self._listeners):
            try:
                listener(context)
            except Exception as e:
                logger.error(f"Session listener {listener!r} failed: {e}")
