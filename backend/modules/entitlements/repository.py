"""
Organization repository for database access.

Limits and usage live as JSON columns on the `organizations` table, stored
in their integer form (`-1` for unlimited).
"""

from datetime import datetime, timezone
from typing import Any, Optional

from shared.repository import BaseRepository
from .models import Organization, Plan, PlanLimits, UsageCounters


class OrganizationRepository(BaseRepository[Organization]):
    """
    Repository for organization data access.

    Note: This repository does NOT perform authorization checks.
    The service layer is responsible for verifying membership.
    """

    table_name = "organizations"

    def update_usage(self, organization_id: str, usage: UsageCounters) -> None:
        """Persist usage counters."""
        data = {
            "usage": usage.to_storage(),
            "updated_at": datetime.now(timezone.utc).isoformat(),
        }
        self._table().update(data).eq("id", organization_id).execute()

    def update_plan(
        self,
        organization_id: str,
        plan: Plan,
        limits: PlanLimits,
    ) -> Optional[Organization]:
        """Persist a plan change together with its limits."""
        return self.update(organization_id, {
            "plan": plan.value,
            "limits": limits.to_storage(),
            "updated_at": datetime.now(timezone.utc).isoformat(),
        })

    def _map_row(self, data: dict[str, Any]) -> Organization:
        """Map database row to Organization model."""
        try:
            plan = Plan(data.get("plan") or Plan.FREE.value)
        except ValueError:
            plan = Plan.FREE

        return Organization(
            id=str(data["id"]),
            name=data.get("name", ""),
            slug=data.get("slug", ""),
            plan=plan,
            status=data.get("status", "active"),
            limits=PlanLimits.from_storage(data.get("limits")),
            usage=UsageCounters.from_storage(data.get("usage")),
            owner_id=data.get("owner_id"),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
        )
