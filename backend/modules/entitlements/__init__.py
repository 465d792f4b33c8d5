"""
Entitlements module.

Decides whether an organization may create more profiles, cards or users
under its plan, and keeps usage counters current.

Public API:
- IEntitlementService: Interface for entitlement operations
- can_create / remaining / is_near_limit / evaluate: Pure quota checks
- Bounded / Unlimited: Tagged limit values
- LimitExceededError: Raised when a quota would be exceeded
"""

from .interfaces import IEntitlementService
from .models import (
    Bounded,
    Unlimited,
    UNLIMITED,
    ResourceKind,
    Plan,
    PlanLimits,
    UsageCounters,
    Organization,
    EntitlementSnapshot,
    LimitStatus,
    LimitsOverview,
    PLAN_LIMITS,
    parse_limit,
    dump_limit,
)
from .evaluator import (
    can_create,
    has_capacity,
    remaining,
    is_near_limit,
    evaluate,
)
from .exceptions import (
    EntitlementError,
    LimitExceededError,
    OrganizationNotFoundError,
    OrganizationAccessDeniedError,
    UnknownPlanError,
)

__all__ = [
    # Interface
    "IEntitlementService",
    # Models
    "Bounded",
    "Unlimited",
    "UNLIMITED",
    "ResourceKind",
    "Plan",
    "PlanLimits",
    "UsageCounters",
    "Organization",
    "EntitlementSnapshot",
    "LimitStatus",
    "LimitsOverview",
    "PLAN_LIMITS",
    "parse_limit",
    "dump_limit",
    # Evaluator
    "can_create",
    "has_capacity",
    "remaining",
    "is_near_limit",
    "evaluate",
    # Exceptions
    "EntitlementError",
    "LimitExceededError",
    "OrganizationNotFoundError",
    "OrganizationAccessDeniedError",
    "UnknownPlanError",
]
