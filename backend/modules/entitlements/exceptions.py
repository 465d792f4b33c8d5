"""
Entitlements module exceptions.

LimitExceededError is distinct from validation errors so the
client can offer an upgrade path instead of a form error.
"""

from typing import Optional

from shared.exceptions import (
    BBTapError,
    NotFoundError,
    ValidationError,
    AuthorizationError,
)


class EntitlementError(BBTapError):
    """Base exception for entitlement-related errors."""

    pass


class LimitExceededError(EntitlementError):
    """
    Raised when creating a resource would exceed the plan quota.

    The UI should handle this by offering a plan upgrade.
    """

    status_code = 403

    def __init__(
        self,
        kind: str,
        limit: int,
        current: int,
        organization_id: Optional[str] = None,
        requested: int = 1,
    ):
        super().__init__(
            f"Plan limit reached for {kind}: {current} of {limit} used",
            code="LIMIT_EXCEEDED",
            details={
                "kind": kind,
                "limit": limit,
                "current": current,
                "requested": requested,
            },
        )
        if organization_id:
            self.details["organization_id"] = organization_id


class OrganizationNotFoundError(NotFoundError):
    """Raised when an organization does not exist."""

    def __init__(self, organization_id: str):
        super().__init__(
            f"Organization not found: {organization_id}",
            code="ORGANIZATION_NOT_FOUND",
            details={"organization_id": organization_id},
        )


class OrganizationAccessDeniedError(AuthorizationError):
    """Raised when a user acts on an organization they do not belong to."""

    def __init__(self, organization_id: str, user_id: str):
        super().__init__(
            f"Access denied to organization: {organization_id}",
            code="ORGANIZATION_ACCESS_DENIED",
            details={"organization_id": organization_id, "user_id": user_id},
        )


class UnknownPlanError(ValidationError):
    """Raised when a plan identifier is not recognised."""

    def __init__(self, plan: str):
        super().__init__(
            f"Unknown plan: {plan}",
            code="UNKNOWN_PLAN",
            details={"plan": plan},
        )
