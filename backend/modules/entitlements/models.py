"""
Entitlements module data models.

Plan limits are tagged values: a quota is either `Bounded(n)` or `Unlimited`.
The `-1` sentinel used by stored organization documents only exists at the
storage boundary (`parse_limit` / `dump_limit`).
"""

import math
from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Literal, Mapping, Optional, Union

from pydantic import BaseModel, Field


UNLIMITED_SENTINEL = -1


class ResourceKind(str, Enum):
    """Resources counted against an organization's plan."""

    USERS = "users"
    CARDS = "cards"
    PROFILES = "profiles"
    STORAGE = "storage"  # megabytes


class Plan(str, Enum):
    """Subscription plans with predefined quotas."""

    FREE = "free"
    STARTER = "starter"
    PROFESSIONAL = "professional"
    ENTERPRISE = "enterprise"


class Unlimited(BaseModel):
    """A quota with no upper bound."""

    model_config = {"frozen": True}

    kind: Literal["unlimited"] = "unlimited"

    def __str__(self) -> str:
        return "unlimited"


class Bounded(BaseModel):
    """A quota allowing at most `value` units."""

    model_config = {"frozen": True}

    kind: Literal["bounded"] = "bounded"
    value: int = Field(..., ge=0)

    def __str__(self) -> str:
        return str(self.value)


Limit = Annotated[Union[Bounded, Unlimited], Field(discriminator="kind")]

UNLIMITED = Unlimited()


def parse_limit(raw: Any) -> Union[Bounded, Unlimited]:
    """
    Convert a stored limit value into a tagged limit.

    `-1` means unlimited. Anything missing or malformed (None, booleans,
    strings, other negatives, fractional or non-finite numbers) becomes
    `Bounded(0)` so that creation is denied rather than silently allowed.
    """
    if isinstance(raw, (Bounded, Unlimited)):
        return raw
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        return Bounded(value=0)
    if not math.isfinite(raw) or raw != int(raw):
        return Bounded(value=0)
    value = int(raw)
    if value == UNLIMITED_SENTINEL:
        return UNLIMITED
    if value < 0:
        return Bounded(value=0)
    return Bounded(value=value)


def dump_limit(limit: Union[Bounded, Unlimited]) -> int:
    """Convert a tagged limit back to its stored integer form."""
    if isinstance(limit, Unlimited):
        return UNLIMITED_SENTINEL
    return limit.value


def parse_count(raw: Any) -> int:
    """Convert a stored usage counter, treating missing/malformed values as 0."""
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        return 0
    if not math.isfinite(raw) or raw < 0:
        return 0
    return int(raw)


class PlanLimits(BaseModel):
    """
    Quotas for each resource kind.

    A field left as None means the limit is absent from the stored
    document; the evaluator treats that as a zero limit.
    """

    model_config = {"frozen": True}

    users: Optional[Limit] = None
    cards: Optional[Limit] = None
    profiles: Optional[Limit] = None
    storage: Optional[Limit] = None

    def get(self, kind: ResourceKind) -> Optional[Union[Bounded, Unlimited]]:
        return getattr(self, kind.value)

    @classmethod
    def from_storage(cls, data: Optional[Mapping[str, Any]]) -> "PlanLimits":
        """
        Build limits from a stored document.

        Accepts both key styles found in stored organizations:
        `{"profiles": 10}` and `{"maxProfiles": 10}`.
        """
        data = data or {}
        values: dict[str, Any] = {}
        for kind in ResourceKind:
            max_key = "max" + kind.value.capitalize()
            if kind.value in data:
                values[kind.value] = parse_limit(data[kind.value])
            elif max_key in data:
                values[kind.value] = parse_limit(data[max_key])
        return cls(**values)

    def to_storage(self) -> dict[str, int]:
        """Serialize to the stored `{kind: int}` form, omitting absent limits."""
        return {
            kind.value: dump_limit(limit)
            for kind in ResourceKind
            if (limit := self.get(kind)) is not None
        }


class UsageCounters(BaseModel):
    """Current consumption per resource kind. None means not recorded."""

    model_config = {"frozen": True}

    users: Optional[int] = Field(None, ge=0)
    cards: Optional[int] = Field(None, ge=0)
    profiles: Optional[int] = Field(None, ge=0)
    storage: Optional[int] = Field(None, ge=0)

    def get(self, kind: ResourceKind) -> Optional[int]:
        return getattr(self, kind.value)

    @classmethod
    def from_storage(cls, data: Optional[Mapping[str, Any]]) -> "UsageCounters":
        data = data or {}
        return cls(**{
            kind.value: parse_count(data[kind.value])
            for kind in ResourceKind
            if kind.value in data
        })

    def to_storage(self) -> dict[str, int]:
        return {kind.value: self.get(kind) or 0 for kind in ResourceKind}

    def adjusted(self, kind: ResourceKind, delta: int) -> "UsageCounters":
        """
        Return a copy with `kind` moved by `delta`.

        A decrement larger than the current counter leaves it unchanged,
        so counters never go negative.
        """
        current = self.get(kind) or 0
        new_value = current + delta
        if new_value < 0:
            new_value = current
        return self.model_copy(update={kind.value: new_value})


PLAN_LIMITS: dict[Plan, PlanLimits] = {
    Plan.FREE: PlanLimits(
        users=Bounded(value=1),
        profiles=Bounded(value=3),
        cards=Bounded(value=5),
        storage=Bounded(value=100),
    ),
    Plan.STARTER: PlanLimits(
        users=Bounded(value=5),
        profiles=Bounded(value=10),
        cards=Bounded(value=25),
        storage=Bounded(value=1000),
    ),
    Plan.PROFESSIONAL: PlanLimits(
        users=Bounded(value=20),
        profiles=Bounded(value=50),
        cards=Bounded(value=100),
        storage=Bounded(value=10000),
    ),
    Plan.ENTERPRISE: PlanLimits(
        users=UNLIMITED,
        profiles=UNLIMITED,
        cards=UNLIMITED,
        storage=Bounded(value=100000),
    ),
}


class Organization(BaseModel):
    """An organization (tenant) with its plan quotas and usage."""

    id: str = Field(..., description="Organization ID")
    name: str = Field(..., description="Display name")
    slug: str = Field(..., description="URL-safe identifier")
    plan: Plan = Field(default=Plan.FREE, description="Current plan")
    status: str = Field(default="active", description="active, suspended, trial, expired")
    limits: PlanLimits = Field(default_factory=PlanLimits)
    usage: UsageCounters = Field(default_factory=UsageCounters)
    owner_id: Optional[str] = Field(None, description="Owning user ID")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class EntitlementSnapshot(BaseModel):
    """
    A consistent limits/usage pair read at one point in time.

    Every decision made from a snapshot uses only this data.
    """

    model_config = {"frozen": True}

    organization_id: Optional[str] = None
    plan: Plan = Plan.FREE
    limits: PlanLimits
    usage: UsageCounters


class LimitStatus(BaseModel):
    """Entitlement state for one resource kind."""

    kind: ResourceKind
    limit: Limit
    used: int
    remaining: Union[int, Unlimited]
    can_create: bool
    near_limit: bool
    percent_used: Optional[float] = Field(
        None,
        description="Usage as a percentage of the limit; None when unlimited",
    )


class LimitsOverview(BaseModel):
    """API response for an organization's limits."""

    organization_id: Optional[str]
    plan: Plan
    resources: dict[ResourceKind, LimitStatus]


class ChangePlanRequest(BaseModel):
    """Request to move an organization to another plan."""

    plan: Plan
