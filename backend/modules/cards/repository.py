"""
Card repository for database access.
"""

from datetime import datetime, timezone
from typing import Any, Optional

from shared.repository import BaseRepository
from .models import Card, ChipType


class CardRepository(BaseRepository[Card]):
    """
    Repository for card data access.

    Note: This repository does NOT perform authorization checks.
    The service layer is responsible for verifying ownership.
    """

    table_name = "cards"

    def list_by_user(self, user_id: str) -> list[Card]:
        result = (
            self._table()
            .select("*")
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .execute()
        )
        return [self._map_row(row) for row in result.data or []]

    def count_by_user(self, user_id: str) -> int:
        result = (
            self._table()
            .select("id", count="exact")
            .eq("user_id", user_id)
            .execute()
        )
        if result.count is not None:
            return result.count
        return len(result.data or [])

    def get_by_card_id(self, card_id: str) -> Optional[Card]:
        return self.find_one("card_id", card_id)

    def card_id_exists(self, card_id: str) -> bool:
        result = self._table().select("id").eq("card_id", card_id).limit(1).execute()
        return bool(result.data)

    def serial_exists(self, serial_number: str) -> bool:
        result = self._table().select("id").eq("serial_number", serial_number).limit(1).execute()
        return bool(result.data)

    def record_tap(self, card: Card) -> Card:
        """Increment the tap counter and stamp the tap time."""
        now = datetime.now(timezone.utc)
        updated = self.update(card.id, {
            "tap_count": card.tap_count + 1,
            "last_tapped": now.isoformat(),
        })
        return updated or card.model_copy(update={"tap_count": card.tap_count + 1, "last_tapped": now})

    def _map_row(self, data: dict[str, Any]) -> Card:
        try:
            chip_type = ChipType(data.get("chip_type") or ChipType.NTAG215.value)
        except ValueError:
            chip_type = ChipType.OTHER
        return Card(
            id=str(data["id"]),
            user_id=str(data["user_id"]),
            organization_id=data.get("organization_id"),
            profile_id=str(data["profile_id"]),
            card_id=data["card_id"],
            chip_type=chip_type,
            serial_number=data.get("serial_number"),
            is_active=data.get("is_active", True),
            is_write_protected=data.get("is_write_protected", False),
            tap_count=data.get("tap_count") or 0,
            last_tapped=data.get("last_tapped"),
            custom_url=data.get("custom_url"),
            created_at=data.get("created_at"),
            activated_at=data.get("activated_at"),
            deactivated_at=data.get("deactivated_at"),
        )
