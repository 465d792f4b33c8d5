"""
Card service implementation.

Cards count against the plan's card quota. Each tap bumps the card's own
counter and records a tap event against the assigned profile.
"""

import logging
import secrets
import string
from collections import Counter
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Optional

from shared.config import get_settings
from shared.models import AuthenticatedUser
from modules.analytics.aggregator import build_device_breakdown, utc_day
from modules.analytics.models import EventSource, EventType
from modules.entitlements.models import ResourceKind
from modules.profiles.exceptions import ProfileNotFoundError

from .exceptions import (
    CardAccessDeniedError,
    CardInactiveError,
    CardNotFoundError,
    CardProfileInvalidError,
    CardSerialConflictError,
)
from .interfaces import ICardService
from .models import (
    Card,
    CardAnalytics,
    CardListResponse,
    CreateCardRequest,
    TapResult,
    UpdateCardRequest,
)
from .repository import CardRepository

if TYPE_CHECKING:
    from modules.analytics.interfaces import IAnalyticsService
    from modules.entitlements.interfaces import IEntitlementService
    from modules.profiles.models import Profile
    from modules.profiles.repository import ProfileRepository

logger = logging.getLogger(__name__)

CARD_ID_ALPHABET = string.ascii_uppercase + string.digits
CARD_ID_LENGTH = 8


def generate_card_id() -> str:
    return "".join(secrets.choice(CARD_ID_ALPHABET) for _ in range(CARD_ID_LENGTH))


class CardService(ICardService):
    """Card service with Supabase backend."""

    def __init__(
        self,
        repository: CardRepository,
        profile_repository: "ProfileRepository",
        entitlements: "IEntitlementService",
        analytics: Optional["IAnalyticsService"] = None,
        frontend_url: Optional[str] = None,
    ):
        self._repository = repository
        self._profiles = profile_repository
        self._entitlements = entitlements
        self._analytics = analytics
        self._frontend_url = (frontend_url or get_settings().frontend_url).rstrip("/")

    async def list_cards(self, user: AuthenticatedUser) -> CardListResponse:
        cards = self._repository.list_by_user(user.id)
        return CardListResponse(cards=cards, total=len(cards))

    async def get_card(self, user: AuthenticatedUser, card_id: str) -> Card:
        return self._get_owned(user, card_id)

    async def create_card(self, user: AuthenticatedUser, request: CreateCardRequest) -> Card:
        personal_usage = None
        if user.organization_id is None:
            personal_usage = {ResourceKind.CARDS: self._repository.count_by_user(user.id)}
        await self._entitlements.check_can_create(
            user, ResourceKind.CARDS, personal_usage=personal_usage
        )

        profile = self._get_assignable_profile(user, request.profile_id)
        if request.serial_number and self._repository.serial_exists(request.serial_number):
            raise CardSerialConflictError(request.serial_number)

        code = generate_card_id()
        while self._repository.card_id_exists(code):
            code = generate_card_id()

        now = datetime.now(timezone.utc).isoformat()
        card = self._repository.insert({
            "user_id": user.id,
            "organization_id": user.organization_id,
            "profile_id": profile.id,
            "card_id": code,
            "chip_type": request.chip_type.value,
            "serial_number": request.serial_number,
            "custom_url": self.profile_url(profile),
            "is_active": True,
            "tap_count": 0,
            "activated_at": now,
        })

        await self._entitlements.increment_usage(user.organization_id, ResourceKind.CARDS)
        logger.info(f"Registered card {card.card_id} for profile {profile.id}")
        return card

    async def update_card(
        self,
        user: AuthenticatedUser,
        card_id: str,
        request: UpdateCardRequest,
    ) -> Card:
        card = self._get_owned(user, card_id)
        data: dict[str, Any] = {
            field: value
            for field, value in request.model_dump(mode="json").items()
            if field in request.model_fields_set and value is not None
        }

        if request.profile_id and request.profile_id != card.profile_id:
            profile = self._get_assignable_profile(user, request.profile_id)
            data["custom_url"] = self.profile_url(profile)
            logger.info(f"Reassigning card {card.card_id} from {card.profile_id} to {profile.id}")

        if (
            request.serial_number
            and request.serial_number != card.serial_number
            and self._repository.serial_exists(request.serial_number)
        ):
            raise CardSerialConflictError(request.serial_number)

        if request.is_active is not None and request.is_active != card.is_active:
            stamp = "activated_at" if request.is_active else "deactivated_at"
            data[stamp] = datetime.now(timezone.utc).isoformat()

        if not data:
            return card
        updated = self._repository.update(card.id, data)
        if updated is None:
            raise CardNotFoundError(card_id)
        return updated

    async def delete_card(self, user: AuthenticatedUser, card_id: str) -> None:
        card = self._get_owned(user, card_id)
        self._repository.delete(card.id)
        await self._entitlements.decrement_usage(card.organization_id, ResourceKind.CARDS)
        logger.info(f"Deleted card {card.card_id}")

    async def tap(
        self,
        card_code: str,
        *,
        user_agent: Optional[str] = None,
        session_id: Optional[str] = None,
    ) -> TapResult:
        card = self._repository.get_by_card_id(card_code)
        if card is None:
            raise CardNotFoundError(card_code)
        if not card.is_active:
            raise CardInactiveError(card_code)

        profile = self._profiles.get_by_id(card.profile_id)
        if profile is None or not profile.is_active:
            raise ProfileNotFoundError(card.profile_id)

        card = self._repository.record_tap(card)
        self._profiles.increment_analytics(profile.id, {"card_taps": 1})
        if self._analytics is not None:
            try:
                await self._analytics.record_event(
                    profile,
                    EventType.TAP,
                    source=EventSource.NFC,
                    user_agent=user_agent,
                    session_id=session_id,
                    card_id=card.card_id,
                    count=False,
                )
            except Exception as e:
                logger.warning(f"Failed to record tap of card {card.card_id}: {e}")

        return TapResult(
            card_id=card.card_id,
            profile_slug=profile.slug,
            redirect_url=self.profile_url(profile),
            tap_count=card.tap_count,
        )

    async def get_card_analytics(self, user: AuthenticatedUser, card_id: str) -> CardAnalytics:
        card = self._get_owned(user, card_id)
        events = []
        if self._analytics is not None:
            events = await self._analytics.list_card_events(card.card_id)

        taps = [event for event in events if event.type == EventType.TAP]
        daily = Counter(utc_day(event.timestamp).isoformat() for event in taps)
        return CardAnalytics(
            card_id=card.card_id,
            total_taps=card.tap_count,
            last_tapped=card.last_tapped,
            daily_taps=dict(sorted(daily.items())),
            device_breakdown=build_device_breakdown(taps),
            recent_activity=list(reversed(taps[-10:])),
        )

    def profile_url(self, profile: "Profile") -> str:
        return f"{self._frontend_url}/p/{profile.slug}"

    # -------------------------------------------------------------------------
    # Private helpers
    # -------------------------------------------------------------------------

    def _get_owned(self, user: AuthenticatedUser, card_id: str) -> Card:
        card = self._repository.get_by_id(card_id)
        if card is None:
            raise CardNotFoundError(card_id)
        if not user.can_manage(card.user_id, card.organization_id):
            raise CardAccessDeniedError(card_id, user.id)
        return card

    def _get_assignable_profile(self, user: AuthenticatedUser, profile_id: str) -> "Profile":
        profile = self._profiles.get_by_id(profile_id)
        if profile is None or profile.user_id != user.id:
            raise CardProfileInvalidError(profile_id)
        return profile
