"""
Organization limits API endpoints.

Expose plan quotas and usage so the client can show headroom and
near-limit warnings before a create fails.
"""

from fastapi import APIRouter, Depends

from api.middleware.auth import get_current_user
from api.dependencies import get_entitlement_service
from shared.models import AuthenticatedUser

from .interfaces import IEntitlementService
from .models import ChangePlanRequest, LimitsOverview, Organization

router = APIRouter()


@router.get("/{organization_id}/limits", response_model=LimitsOverview)
async def get_organization_limits(
    organization_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IEntitlementService = Depends(get_entitlement_service),
) -> LimitsOverview:
    """
    Get limits, usage and remaining headroom for each resource kind.

    Only members of the organization (or super admins) may read it.
    """
    return await service.get_limits_overview(user, organization_id)


@router.put("/{organization_id}/plan", response_model=Organization)
async def change_organization_plan(
    organization_id: str,
    request: ChangePlanRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IEntitlementService = Depends(get_entitlement_service),
) -> Organization:
    """
    Move an organization to another plan, replacing its limits.

    Only super admins may change a plan. Usage counters are left untouched.
    """
    return await service.apply_plan(user, organization_id, request.plan)
