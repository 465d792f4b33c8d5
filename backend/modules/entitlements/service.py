"""
Entitlement service implementation.

Wraps the pure evaluator with organization lookups and usage bookkeeping.
Each decision re-reads the organization so it works on a fresh snapshot.
"""

import logging
from typing import Optional, Union

from shared.config import get_settings
from shared.models import AuthenticatedUser

from . import evaluator
from .exceptions import (
    LimitExceededError,
    UnknownPlanError,
    OrganizationAccessDeniedError,
    OrganizationNotFoundError,
)
from .interfaces import IEntitlementService
from .models import (
    Bounded,
    EntitlementSnapshot,
    LimitStatus,
    LimitsOverview,
    Organization,
    Plan,
    PLAN_LIMITS,
    PlanLimits,
    ResourceKind,
    UsageCounters,
)
from .repository import OrganizationRepository

logger = logging.getLogger(__name__)


def get_plan_limits(plan: Union[Plan, str]) -> PlanLimits:
    """
    Get the quotas of a plan.

    Raises:
        UnknownPlanError: If the plan is not recognised
    """
    try:
        return PLAN_LIMITS[Plan(plan)]
    except ValueError:
        raise UnknownPlanError(str(plan))


class EntitlementService(IEntitlementService):
    """Entitlement checks backed by the organizations table."""

    def __init__(
        self,
        repository: OrganizationRepository,
        near_limit_threshold: Optional[float] = None,
    ):
        self._repository = repository
        self._threshold = (
            near_limit_threshold
            if near_limit_threshold is not None
            else get_settings().near_limit_threshold
        )

    async def get_snapshot(
        self,
        user: AuthenticatedUser,
        personal_usage: Optional[dict[ResourceKind, int]] = None,
    ) -> EntitlementSnapshot:
        """Read the limits/usage pair that applies to a user."""
        if user.organization_id is None:
            counts = {kind.value: count for kind, count in (personal_usage or {}).items()}
            return EntitlementSnapshot(
                organization_id=None,
                plan=Plan.FREE,
                limits=get_plan_limits(Plan.FREE),
                usage=UsageCounters(**counts),
            )

        organization = self._get_organization(user.organization_id)
        return EntitlementSnapshot(
            organization_id=organization.id,
            plan=organization.plan,
            limits=organization.limits,
            usage=organization.usage,
        )

    async def check_can_create(
        self,
        user: AuthenticatedUser,
        kind: ResourceKind,
        amount: int = 1,
        personal_usage: Optional[dict[ResourceKind, int]] = None,
    ) -> LimitStatus:
        """Verify that `amount` more units of `kind` may be created."""
        snapshot = await self.get_snapshot(user, personal_usage)
        status = evaluator.evaluate(kind, snapshot.limits, snapshot.usage, self._threshold)

        if not evaluator.has_capacity(kind, snapshot.limits, snapshot.usage, amount):
            limit = status.limit.value if isinstance(status.limit, Bounded) else -1
            logger.warning(
                f"Entitlement denied: user={user.id} org={snapshot.organization_id} "
                f"kind={kind.value} used={status.used} limit={limit}"
            )
            raise LimitExceededError(
                kind=kind.value,
                limit=limit,
                current=status.used,
                organization_id=snapshot.organization_id,
                requested=amount,
            )

        if status.near_limit:
            logger.info(
                f"Organization {snapshot.organization_id} near {kind.value} limit "
                f"({status.percent_used}%)"
            )
        return status

    async def increment_usage(
        self,
        organization_id: Optional[str],
        kind: ResourceKind,
        amount: int = 1,
    ) -> None:
        """Record newly created resources."""
        await self._adjust_usage(organization_id, kind, amount)

    async def decrement_usage(
        self,
        organization_id: Optional[str],
        kind: ResourceKind,
        amount: int = 1,
    ) -> None:
        """Record deleted resources."""
        await self._adjust_usage(organization_id, kind, -amount)

    async def get_limits_overview(
        self,
        user: AuthenticatedUser,
        organization_id: str,
    ) -> LimitsOverview:
        """Entitlement status of every resource kind for an organization."""
        organization = self._get_member_organization(user, organization_id)
        return LimitsOverview(
            organization_id=organization.id,
            plan=organization.plan,
            resources={
                kind: evaluator.evaluate(kind, organization.limits, organization.usage, self._threshold)
                for kind in ResourceKind
            },
        )

    async def apply_plan(
        self,
        user: AuthenticatedUser,
        organization_id: str,
        plan: Plan,
    ) -> Organization:
        """Replace an organization's limits with those of `plan`."""
        organization = self._get_member_organization(user, organization_id)
        if not user.is_super_admin:
            raise OrganizationAccessDeniedError(organization_id, user.id)

        limits = get_plan_limits(plan)
        updated = self._repository.update_plan(organization.id, plan, limits)
        logger.info(f"Organization {organization.id} moved from {organization.plan.value} to {plan.value}")
        return updated or organization.model_copy(update={"plan": plan, "limits": limits})

    # -------------------------------------------------------------------------
    # Private helpers
    # -------------------------------------------------------------------------

    def _get_organization(self, organization_id: str) -> Organization:
        organization = self._repository.get_by_id(organization_id)
        if organization is None:
            raise OrganizationNotFoundError(organization_id)
        return organization

    def _get_member_organization(self, user: AuthenticatedUser, organization_id: str) -> Organization:
        if user.organization_id != organization_id and not user.is_super_admin:
            raise OrganizationAccessDeniedError(organization_id, user.id)
        return self._get_organization(organization_id)

    async def _adjust_usage(
        self,
        organization_id: Optional[str],
        kind: ResourceKind,
        delta: int,
    ) -> None:
        if organization_id is None or delta == 0:
            return
        organization = self._get_organization(organization_id)
        usage = organization.usage.adjusted(kind, delta)
        self._repository.update_usage(organization_id, usage)
        logger.debug(
            f"Usage {kind.value} for organization {organization_id}: "
            f"{organization.usage.get(kind) or 0} -> {usage.get(kind)}"
        )
