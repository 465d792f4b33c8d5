"""
Plan quota evaluation.

Pure functions over a limits/usage snapshot. They never raise and never
fetch data: missing or malformed inputs are read as a zero limit and zero
usage, which denies creation.
"""

from typing import Any, Mapping, Optional, Union

from .models import (
    Bounded,
    LimitStatus,
    PlanLimits,
    ResourceKind,
    UNLIMITED,
    Unlimited,
    UsageCounters,
    parse_count,
)

DEFAULT_NEAR_LIMIT_THRESHOLD = 0.75

LimitsInput = Union[PlanLimits, Mapping[str, Any], None]
UsageInput = Union[UsageCounters, Mapping[str, Any], None]


def _coerce_kind(kind: Union[ResourceKind, str]) -> Optional[ResourceKind]:
    try:
        return ResourceKind(kind)
    except ValueError:
        return None


def _limit_for(kind: Optional[ResourceKind], limits: LimitsInput) -> Union[Bounded, Unlimited]:
    if kind is None or limits is None:
        return Bounded(value=0)
    if not isinstance(limits, PlanLimits):
        try:
            limits = PlanLimits.from_storage(limits)
        except (TypeError, AttributeError):
            return Bounded(value=0)
    limit = limits.get(kind)
    return limit if limit is not None else Bounded(value=0)


def _usage_for(kind: Optional[ResourceKind], usage: UsageInput) -> int:
    if kind is None or usage is None:
        return 0
    if isinstance(usage, UsageCounters):
        return usage.get(kind) or 0
    try:
        return parse_count(usage.get(kind.value))
    except AttributeError:
        return 0


def can_create(
    kind: Union[ResourceKind, str],
    limits: LimitsInput,
    usage: UsageInput,
) -> bool:
    """Whether one more unit of `kind` fits in the plan."""
    return has_capacity(kind, limits, usage, amount=1)


def has_capacity(
    kind: Union[ResourceKind, str],
    limits: LimitsInput,
    usage: UsageInput,
    amount: int = 1,
) -> bool:
    """
    Whether `amount` more units of `kind` fit in the plan.

    Used directly for storage, where a single upload consumes several
    megabytes at once.
    """
    resource = _coerce_kind(kind)
    limit = _limit_for(resource, limits)
    if isinstance(limit, Unlimited):
        return True
    used = _usage_for(resource, usage)
    return used + max(amount, 1) <= limit.value


def remaining(
    kind: Union[ResourceKind, str],
    limits: LimitsInput,
    usage: UsageInput,
) -> Union[int, Unlimited]:
    """Units still available, or UNLIMITED."""
    resource = _coerce_kind(kind)
    limit = _limit_for(resource, limits)
    if isinstance(limit, Unlimited):
        return UNLIMITED
    return max(0, limit.value - _usage_for(resource, usage))


def is_near_limit(
    kind: Union[ResourceKind, str],
    limits: LimitsInput,
    usage: UsageInput,
    threshold: float = DEFAULT_NEAR_LIMIT_THRESHOLD,
) -> bool:
    """
    Whether usage has reached `threshold` of the limit.

    A zero limit counts as fully used.
    """
    resource = _coerce_kind(kind)
    limit = _limit_for(resource, limits)
    if isinstance(limit, Unlimited):
        return False
    if limit.value == 0:
        return True
    return _usage_for(resource, usage) / limit.value >= threshold


def evaluate(
    kind: Union[ResourceKind, str],
    limits: LimitsInput,
    usage: UsageInput,
    threshold: float = DEFAULT_NEAR_LIMIT_THRESHOLD,
) -> LimitStatus:
    """Bundle every entitlement answer for one resource kind."""
    resource = ResourceKind(kind)
    limit = _limit_for(resource, limits)
    used = _usage_for(resource, usage)

    percent_used: Optional[float] = None
    if isinstance(limit, Bounded):
        percent_used = 100.0 if limit.value == 0 else round(used / limit.value * 100, 2)

    return LimitStatus(
        kind=resource,
        limit=limit,
        used=used,
        remaining=remaining(resource, limits, usage),
        can_create=can_create(resource, limits, usage),
        near_limit=is_near_limit(resource, limits, usage, threshold),
        percent_used=percent_used,
    )
