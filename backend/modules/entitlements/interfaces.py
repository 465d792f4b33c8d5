"""
Entitlements module interface.

Profile and card services depend on IEntitlementService to gate creation
and keep usage counters in step with deletes.
"""

from typing import Optional, Protocol, runtime_checkable

from shared.models import AuthenticatedUser

from .models import (
    EntitlementSnapshot,
    LimitStatus,
    LimitsOverview,
    Organization,
    Plan,
    ResourceKind,
)


@runtime_checkable
class IEntitlementService(Protocol):
    """Interface for plan quota checks and usage bookkeeping."""

    async def get_snapshot(
        self,
        user: AuthenticatedUser,
        personal_usage: Optional[dict[ResourceKind, int]] = None,
    ) -> EntitlementSnapshot:
        """
        Read the limits/usage pair that applies to a user.

        Organization members get their organization's snapshot. Users
        without an organization get free plan limits and the usage the
        caller counted for them (`personal_usage`).

        Raises:
            OrganizationNotFoundError: If the user's organization is missing
        """
        ...

    async def check_can_create(
        self,
        user: AuthenticatedUser,
        kind: ResourceKind,
        amount: int = 1,
        personal_usage: Optional[dict[ResourceKind, int]] = None,
    ) -> LimitStatus:
        """
        Verify that `amount` more units of `kind` may be created.

        Returns:
            LimitStatus computed from the snapshot used for the decision

        Raises:
            LimitExceededError: If the quota would be exceeded
        """
        ...

    async def increment_usage(
        self,
        organization_id: Optional[str],
        kind: ResourceKind,
        amount: int = 1,
    ) -> None:
        """Record newly created resources. No-op without an organization."""
        ...

    async def decrement_usage(
        self,
        organization_id: Optional[str],
        kind: ResourceKind,
        amount: int = 1,
    ) -> None:
        """Record deleted resources. No-op without an organization."""
        ...

    async def get_limits_overview(self, user: AuthenticatedUser, organization_id: str) -> LimitsOverview:
        """Entitlement status of every resource kind for an organization."""
        ...

    async def apply_plan(self, user: AuthenticatedUser, organization_id: str, plan: Plan) -> Organization:
        """Replace an organization's limits with those of `plan`."""
        ...
