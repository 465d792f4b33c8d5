"""Tests for the card service."""

import pytest
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

from modules.analytics.models import AnalyticsEvent, DeviceClass, EventSource, EventType
from modules.cards.exceptions import (
    CardAccessDeniedError,
    CardInactiveError,
    CardNotFoundError,
    CardProfileInvalidError,
    CardSerialConflictError,
)
from modules.cards.models import Card, ChipType, CreateCardRequest, UpdateCardRequest
from modules.cards.service import CARD_ID_ALPHABET, CardService, generate_card_id
from modules.entitlements.exceptions import LimitExceededError
from modules.entitlements.models import ResourceKind
from modules.profiles.exceptions import ProfileNotFoundError
from modules.profiles.models import PersonalInfo, Profile

FRONTEND = "https://bbtap.example"


def make_profile(**overrides) -> Profile:
    data = {
        "id": "p1",
        "user_id": "test-user-123",
        "slug": "jane-doe",
        "personal_info": PersonalInfo(first_name="Jane", last_name="Doe"),
    }
    data.update(overrides)
    return Profile(**data)


def make_card(**overrides) -> Card:
    data = {
        "id": "c1",
        "user_id": "test-user-123",
        "profile_id": "p1",
        "card_id": "ABCD1234",
        "tap_count": 4,
    }
    data.update(overrides)
    return Card(**data)


@pytest.fixture
def repository():
    repo = MagicMock()
    repo.count_by_user.return_value = 0
    repo.serial_exists.return_value = False
    repo.card_id_exists.return_value = False
    repo.insert.side_effect = lambda data: Card(id="c-new", **data)
    repo.get_by_id.return_value = make_card()
    repo.get_by_card_id.return_value = make_card()
    repo.record_tap.side_effect = lambda card: card.model_copy(update={"tap_count": card.tap_count + 1})
    return repo


@pytest.fixture
def profiles():
    repo = MagicMock()
    repo.get_by_id.return_value = make_profile()
    return repo


@pytest.fixture
def entitlements():
    return AsyncMock()


@pytest.fixture
def analytics():
    return AsyncMock()


@pytest.fixture
def service(repository, profiles, entitlements, analytics):
    return CardService(repository, profiles, entitlements, analytics=analytics, frontend_url=FRONTEND + "/")


class TestGenerateCardId:
    def test_shape(self):
        code = generate_card_id()
        assert len(code) == 8
        assert all(ch in CARD_ID_ALPHABET for ch in code)


class TestCreateCard:
    @pytest.mark.asyncio
    async def test_registers_card(self, service, repository, entitlements, user):
        card = await service.create_card(user, CreateCardRequest(profile_id="p1", chip_type=ChipType.NTAG216))

        assert card.profile_id == "p1"
        assert card.chip_type == ChipType.NTAG216
        assert card.custom_url == f"{FRONTEND}/p/jane-doe"
        assert card.tap_count == 0
        assert card.activated_at is not None
        entitlements.check_can_create.assert_awaited_once_with(
            user, ResourceKind.CARDS, personal_usage={ResourceKind.CARDS: 0}
        )
        entitlements.increment_usage.assert_awaited_once_with(None, ResourceKind.CARDS)

    @pytest.mark.asyncio
    async def test_retries_taken_code(self, service, repository, user):
        repository.card_id_exists.side_effect = [True, False]

        await service.create_card(user, CreateCardRequest(profile_id="p1"))

        assert repository.card_id_exists.call_count == 2

    @pytest.mark.asyncio
    async def test_limit_exceeded(self, service, repository, entitlements, user):
        entitlements.check_can_create.side_effect = LimitExceededError("cards", 1, 1)

        with pytest.raises(LimitExceededError):
            await service.create_card(user, CreateCardRequest(profile_id="p1"))
        repository.insert.assert_not_called()

    @pytest.mark.asyncio
    async def test_profile_must_be_owned(self, service, profiles, repository, user):
        profiles.get_by_id.return_value = make_profile(user_id="someone-else")

        with pytest.raises(CardProfileInvalidError):
            await service.create_card(user, CreateCardRequest(profile_id="p1"))
        repository.insert.assert_not_called()

    @pytest.mark.asyncio
    async def test_serial_conflict(self, service, repository, user):
        repository.serial_exists.return_value = True

        with pytest.raises(CardSerialConflictError):
            await service.create_card(user, CreateCardRequest(profile_id="p1", serial_number="04:A2:1B"))


class TestUpdateCard:
    @pytest.mark.asyncio
    async def test_reassign_updates_url(self, service, repository, profiles, user):
        profiles.get_by_id.return_value = make_profile(id="p2", slug="jane-work")
        repository.update.return_value = make_card(profile_id="p2")

        await service.update_card(user, "c1", UpdateCardRequest(profile_id="p2"))

        card_id, data = repository.update.call_args.args
        assert card_id == "c1"
        assert data == {"profile_id": "p2", "custom_url": f"{FRONTEND}/p/jane-work"}

    @pytest.mark.asyncio
    async def test_deactivate_stamps_time(self, service, repository, user):
        repository.update.return_value = make_card(is_active=False)

        await service.update_card(user, "c1", UpdateCardRequest(is_active=False))

        data = repository.update.call_args.args[1]
        assert data["is_active"] is False
        assert "deactivated_at" in data

    @pytest.mark.asyncio
    async def test_noop(self, service, repository, user):
        card = await service.update_card(user, "c1", UpdateCardRequest())

        assert card.card_id == "ABCD1234"
        repository.update.assert_not_called()

    @pytest.mark.asyncio
    async def test_not_owner(self, service, repository, user):
        repository.get_by_id.return_value = make_card(user_id="someone-else")

        with pytest.raises(CardAccessDeniedError):
            await service.update_card(user, "c1", UpdateCardRequest(is_active=False))

    @pytest.mark.asyncio
    async def test_org_admin_denied_other_org_card(self, service, repository, org_admin):
        repository.get_by_id.return_value = make_card(user_id="someone-else", organization_id="org-2")

        with pytest.raises(CardAccessDeniedError):
            await service.update_card(org_admin, "c1", UpdateCardRequest(is_active=False))
        with pytest.raises(CardAccessDeniedError):
            await service.get_card_analytics(org_admin, "c1")
        repository.update.assert_not_called()


class TestDeleteCard:
    @pytest.mark.asyncio
    async def test_releases_quota(self, service, repository, entitlements, user):
        repository.get_by_id.return_value = make_card(organization_id="org-1")

        await service.delete_card(user, "c1")

        repository.delete.assert_called_once_with("c1")
        entitlements.decrement_usage.assert_awaited_once_with("org-1", ResourceKind.CARDS)

    @pytest.mark.asyncio
    async def test_org_admin_deletes_card_in_own_org(self, service, repository, org_admin):
        repository.get_by_id.return_value = make_card(user_id="someone-else", organization_id="org-1")

        await service.delete_card(org_admin, "c1")

        repository.delete.assert_called_once_with("c1")


class TestTap:
    @pytest.mark.asyncio
    async def test_tap_records_and_redirects(self, service, repository, profiles, analytics):
        result = await service.tap("ABCD1234", user_agent="Mozilla/5.0 (iPhone)", session_id="s1")

        assert result.card_id == "ABCD1234"
        assert result.tap_count == 5
        assert result.redirect_url == f"{FRONTEND}/p/jane-doe"
        assert result.profile_slug == "jane-doe"
        args, kwargs = analytics.record_event.call_args
        assert args[1] == EventType.TAP
        assert kwargs["source"] == EventSource.NFC
        assert kwargs["card_id"] == "ABCD1234"
        assert kwargs["session_id"] == "s1"
        assert kwargs["count"] is False
        profiles.increment_analytics.assert_called_once_with("p1", {"card_taps": 1})

    @pytest.mark.asyncio
    async def test_analytics_failure_keeps_counters_in_step(self, service, profiles, analytics):
        analytics.record_event.side_effect = RuntimeError("db down")

        result = await service.tap("ABCD1234")

        assert result.tap_count == 5
        profiles.increment_analytics.assert_called_once_with("p1", {"card_taps": 1})

    @pytest.mark.asyncio
    async def test_tap_without_analytics_bumps_profile(self, repository, profiles, entitlements):
        service = CardService(repository, profiles, entitlements, frontend_url=FRONTEND)

        result = await service.tap("ABCD1234")

        assert result.tap_count == 5
        repository.record_tap.assert_called_once()
        profiles.increment_analytics.assert_called_once_with("p1", {"card_taps": 1})

    @pytest.mark.asyncio
    async def test_unknown_card(self, service, repository):
        repository.get_by_card_id.return_value = None

        with pytest.raises(CardNotFoundError):
            await service.tap("ZZZZ0000")

    @pytest.mark.asyncio
    async def test_inactive_card(self, service, repository, analytics):
        repository.get_by_card_id.return_value = make_card(is_active=False)

        with pytest.raises(CardInactiveError):
            await service.tap("ABCD1234")
        repository.record_tap.assert_not_called()
        analytics.record_event.assert_not_called()

    @pytest.mark.asyncio
    async def test_unpublished_profile(self, service, profiles, repository):
        profiles.get_by_id.return_value = make_profile(is_active=False)

        with pytest.raises(ProfileNotFoundError):
            await service.tap("ABCD1234")
        repository.record_tap.assert_not_called()


class TestCardAnalytics:
    @pytest.mark.asyncio
    async def test_daily_taps_and_devices(self, service, analytics, user):
        def tap(day: int, device: DeviceClass) -> AnalyticsEvent:
            return AnalyticsEvent(
                type=EventType.TAP,
                profile_id="p1",
                timestamp=datetime(2024, 3, day, 12, tzinfo=timezone.utc),
                device=device,
                card_id="ABCD1234",
            )

        analytics.list_card_events.return_value = [
            tap(1, DeviceClass.MOBILE),
            tap(1, DeviceClass.MOBILE),
            tap(3, DeviceClass.DESKTOP),
            AnalyticsEvent(
                type=EventType.VIEW,
                profile_id="p1",
                timestamp=datetime(2024, 3, 3, tzinfo=timezone.utc),
                card_id="ABCD1234",
            ),
        ]

        result = await service.get_card_analytics(user, "c1")

        assert result.total_taps == 4
        assert result.daily_taps == {"2024-03-01": 2, "2024-03-03": 1}
        assert result.device_breakdown.mobile == 2
        assert result.device_breakdown.desktop == 1
        assert result.recent_activity[0].timestamp.day == 3
        analytics.list_card_events.assert_awaited_once_with("ABCD1234")
