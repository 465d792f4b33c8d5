"""Tests for the profile service."""

import pytest
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

from modules.analytics.models import (
    AnalyticsEvent,
    EventSource,
    EventType,
    RecordEventRequest,
)
from modules.entitlements.exceptions import LimitExceededError
from modules.entitlements.models import ResourceKind
from modules.profiles.exceptions import (
    InvalidTemplateError,
    ProfileAccessDeniedError,
    ProfileNotFoundError,
    TemplateNotFoundError,
)
from modules.profiles.models import (
    CreateProfileRequest,
    Customization,
    PersonalInfo,
    Profile,
    SectionType,
    Template,
    TemplateSection,
    TemplateStructure,
    UpdateProfileRequest,
)
from modules.profiles.service import ProfileService
from shared.models import AuthenticatedUser


def make_profile(**overrides) -> Profile:
    data = {
        "id": "p1",
        "user_id": "test-user-123",
        "slug": "jane-doe",
        "personal_info": PersonalInfo(first_name="Jane", last_name="Doe"),
        "template_id": "t1",
    }
    data.update(overrides)
    return Profile(**data)


def make_template(**overrides) -> Template:
    data = {
        "id": "t1",
        "name": "Modern",
        "slug": "modern",
        "structure": TemplateStructure(
            sections=[
                TemplateSection(id="header", type=SectionType.HEADER, order=0),
                TemplateSection(id="about", type=SectionType.ABOUT, order=1),
            ]
        ),
    }
    data.update(overrides)
    return Template(**data)


@pytest.fixture
def repository():
    repo = MagicMock()
    repo.count_by_user.return_value = 0
    repo.slug_exists.return_value = False
    repo.create_profile.side_effect = lambda data: Profile(id="p-new", **data)
    repo.get_by_id.return_value = make_profile()
    repo.get_by_slug.return_value = make_profile()
    return repo


@pytest.fixture
def templates():
    repo = MagicMock()
    repo.get_by_id.return_value = make_template()
    repo.get_by_slug.return_value = make_template()
    repo.list_active.return_value = [make_template()]
    return repo


@pytest.fixture
def entitlements():
    return AsyncMock()


@pytest.fixture
def analytics():
    return AsyncMock()


@pytest.fixture
def service(repository, templates, entitlements, analytics):
    return ProfileService(
        repository,
        templates,
        entitlements,
        analytics=analytics,
        default_template_slug="modern",
    )


def create_request(**overrides) -> CreateProfileRequest:
    data = {"personal_info": PersonalInfo(first_name="Jane", last_name="Doe")}
    data.update(overrides)
    return CreateProfileRequest(**data)


class TestCreateProfile:
    @pytest.mark.asyncio
    async def test_creates_with_default_template(self, service, repository, templates, entitlements, user):
        profile = await service.create_profile(user, create_request())

        assert profile.id == "p-new"
        assert profile.slug == "jane-doe"
        assert profile.template_id == "t1"
        assert profile.user_id == user.id
        assert profile.analytics.views == 0
        templates.get_by_slug.assert_called_with("modern")
        templates.increment_usage_count.assert_called_once_with("t1")
        entitlements.increment_usage.assert_awaited_once_with(None, ResourceKind.PROFILES)

    @pytest.mark.asyncio
    async def test_personal_usage_for_user_without_org(self, service, repository, entitlements, user):
        repository.count_by_user.return_value = 1

        await service.create_profile(user, create_request())

        entitlements.check_can_create.assert_awaited_once_with(
            user, ResourceKind.PROFILES, personal_usage={ResourceKind.PROFILES: 1}
        )

    @pytest.mark.asyncio
    async def test_org_user_counts_against_org(self, service, repository, entitlements, org_user):
        await service.create_profile(org_user, create_request())

        repository.count_by_user.assert_not_called()
        entitlements.check_can_create.assert_awaited_once_with(
            org_user, ResourceKind.PROFILES, personal_usage=None
        )
        entitlements.increment_usage.assert_awaited_once_with("org-1", ResourceKind.PROFILES)
        assert repository.create_profile.call_args.args[0]["organization_id"] == "org-1"

    @pytest.mark.asyncio
    async def test_limit_exceeded_writes_nothing(self, service, repository, entitlements, user):
        entitlements.check_can_create.side_effect = LimitExceededError("profiles", 1, 1)

        with pytest.raises(LimitExceededError) as exc_info:
            await service.create_profile(user, create_request())

        assert exc_info.value.code == "LIMIT_EXCEEDED"
        repository.create_profile.assert_not_called()
        entitlements.increment_usage.assert_not_called()

    @pytest.mark.asyncio
    async def test_slug_collision_gets_suffix(self, service, repository, user):
        repository.slug_exists.side_effect = lambda slug: slug == "jane-doe"

        profile = await service.create_profile(user, create_request())

        assert profile.slug == "jane-doe-1"

    @pytest.mark.asyncio
    async def test_explicit_inactive_template_rejected(self, service, repository, templates, user):
        templates.get_by_id.return_value = make_template(id="t2", is_active=False)

        with pytest.raises(InvalidTemplateError):
            await service.create_profile(user, create_request(template_id="t2"))
        repository.create_profile.assert_not_called()

    @pytest.mark.asyncio
    async def test_falls_back_to_most_used_template(self, service, templates, user):
        templates.get_by_slug.return_value = None
        templates.list_active.return_value = [make_template(id="t9", slug="popular")]

        profile = await service.create_profile(user, create_request())

        assert profile.template_id == "t9"

    @pytest.mark.asyncio
    async def test_no_templates_uses_default_layout(self, service, templates, user):
        templates.get_by_slug.return_value = None
        templates.list_active.return_value = []

        profile = await service.create_profile(user, create_request())

        assert profile.template_id is None
        templates.increment_usage_count.assert_not_called()


class TestUpdateProfile:
    @pytest.mark.asyncio
    async def test_only_sent_fields_written(self, service, repository, user):
        repository.update_profile.return_value = make_profile(customization=Customization(primary_color="#ff0000"))

        updated = await service.update_profile(
            user,
            "p1",
            UpdateProfileRequest(customization=Customization(primary_color="#ff0000")),
        )

        profile_id, data = repository.update_profile.call_args.args
        assert profile_id == "p1"
        assert set(data) == {"customization"}
        assert "slug" not in data
        assert updated.customization.primary_color == "#ff0000"

    @pytest.mark.asyncio
    async def test_empty_update_is_noop(self, service, repository, user):
        profile = await service.update_profile(user, "p1", UpdateProfileRequest())

        assert profile.slug == "jane-doe"
        repository.update_profile.assert_not_called()

    @pytest.mark.asyncio
    async def test_slug_is_not_updatable(self, service, repository, user):
        request = UpdateProfileRequest.model_validate({"slug": "new-slug", "is_active": False})
        repository.update_profile.return_value = make_profile(is_active=False)

        await service.update_profile(user, "p1", request)

        data = repository.update_profile.call_args.args[1]
        assert data == {"is_active": False}

    @pytest.mark.asyncio
    async def test_other_users_profile(self, service, repository, user):
        repository.get_by_id.return_value = make_profile(user_id="someone-else")

        with pytest.raises(ProfileAccessDeniedError):
            await service.update_profile(user, "p1", UpdateProfileRequest(is_active=False))

    @pytest.mark.asyncio
    async def test_org_admin_may_edit_profile_in_own_org(self, service, repository, org_admin):
        repository.get_by_id.return_value = make_profile(user_id="someone-else", organization_id="org-1")
        repository.update_profile.return_value = make_profile(is_active=False)

        updated = await service.update_profile(org_admin, "p1", UpdateProfileRequest(is_active=False))

        assert updated.is_active is False

    @pytest.mark.asyncio
    async def test_org_admin_denied_other_org(self, service, repository, org_admin):
        repository.get_by_id.return_value = make_profile(user_id="someone-else", organization_id="org-2")

        with pytest.raises(ProfileAccessDeniedError):
            await service.get_profile(org_admin, "p1")
        with pytest.raises(ProfileAccessDeniedError):
            await service.delete_profile(org_admin, "p1")
        repository.delete.assert_not_called()

    @pytest.mark.asyncio
    async def test_platform_admin_may_edit_any_profile(self, service, repository):
        admin = AuthenticatedUser(id="staff-1", email="staff@example.com", role="admin")
        repository.get_by_id.return_value = make_profile(user_id="someone-else", organization_id="org-2")
        repository.update_profile.return_value = make_profile(is_active=False)

        updated = await service.update_profile(admin, "p1", UpdateProfileRequest(is_active=False))

        assert updated.is_active is False

    @pytest.mark.asyncio
    async def test_switch_to_unknown_template(self, service, templates, user):
        templates.get_by_id.return_value = None

        with pytest.raises(InvalidTemplateError):
            await service.update_profile(user, "p1", UpdateProfileRequest(template_id="nope"))


class TestDeleteProfile:
    @pytest.mark.asyncio
    async def test_releases_quota(self, service, repository, entitlements, user):
        repository.get_by_id.return_value = make_profile(organization_id="org-1")

        await service.delete_profile(user, "p1")

        repository.delete.assert_called_once_with("p1")
        entitlements.decrement_usage.assert_awaited_once_with("org-1", ResourceKind.PROFILES)

    @pytest.mark.asyncio
    async def test_missing(self, service, repository, entitlements, user):
        repository.get_by_id.return_value = None

        with pytest.raises(ProfileNotFoundError):
            await service.delete_profile(user, "p1")
        entitlements.decrement_usage.assert_not_called()


class TestPublicView:
    @pytest.mark.asyncio
    async def test_resolves_and_records_view(self, service, analytics):
        view = await service.get_public_view(
            "jane-doe",
            source="qr",
            user_agent="Mozilla/5.0 (iPhone)",
            session_id="1.2.3.4_abc",
            referrer="https://t.co",
        )

        assert view.slug == "jane-doe"
        assert view.template_slug == "modern"
        analytics.record_event.assert_awaited_once()
        args, kwargs = analytics.record_event.call_args
        assert args[1] == EventType.VIEW
        assert kwargs["source"] == EventSource.QR
        assert kwargs["session_id"] == "1.2.3.4_abc"
        assert kwargs["referrer"] == "https://t.co"

    @pytest.mark.asyncio
    async def test_analytics_failure_does_not_fail_view(self, service, analytics):
        analytics.record_event.side_effect = RuntimeError("db down")

        view = await service.get_public_view("jane-doe")

        assert view.profile_id == "p1"

    @pytest.mark.asyncio
    async def test_inactive_profile_hidden(self, service, repository, analytics):
        repository.get_by_slug.return_value = make_profile(is_active=False)

        with pytest.raises(ProfileNotFoundError):
            await service.get_public_view("jane-doe")
        analytics.record_event.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_template_renders_default_layout(self, service, templates):
        templates.get_by_id.return_value = None

        view = await service.get_public_view("jane-doe")

        assert view.template_slug is None
        assert view.section_types() == [SectionType.HEADER, SectionType.CONTACT]

    @pytest.mark.asyncio
    async def test_preview_does_not_record(self, service, analytics, user):
        view = await service.preview_profile(user, "p1")

        assert view.section_types() == [SectionType.HEADER, SectionType.ABOUT]
        analytics.record_event.assert_not_called()


class TestRecordPublicEvent:
    @pytest.mark.asyncio
    async def test_records(self, service, analytics):
        analytics.record_event.return_value = AnalyticsEvent(
            id="e1",
            type=EventType.CLICK,
            profile_id="p1",
            timestamp=datetime.now(timezone.utc),
        )

        response = await service.record_public_event(
            "jane-doe",
            RecordEventRequest(type=EventType.CLICK, element_clicked="linkedin"),
            session_id="s1",
        )

        assert response.recorded is True
        assert response.event_id == "e1"
        kwargs = analytics.record_event.call_args.kwargs
        assert kwargs["element_clicked"] == "linkedin"
        assert kwargs["source"] == EventSource.DIRECT
        assert kwargs["session_id"] == "s1"

    @pytest.mark.asyncio
    async def test_client_session_wins(self, service, analytics):
        analytics.record_event.return_value = None

        await service.record_public_event(
            "jane-doe",
            RecordEventRequest(type=EventType.SHARE, session_id="client-session"),
            session_id="s1",
        )

        assert analytics.record_event.call_args.kwargs["session_id"] == "client-session"

    @pytest.mark.asyncio
    async def test_deduplicated(self, service, analytics):
        analytics.record_event.return_value = None

        response = await service.record_public_event("jane-doe", RecordEventRequest(type=EventType.VIEW))

        assert response.recorded is False

    @pytest.mark.asyncio
    async def test_failure_propagates(self, service, analytics):
        analytics.record_event.side_effect = RuntimeError("db down")

        with pytest.raises(RuntimeError):
            await service.record_public_event("jane-doe", RecordEventRequest(type=EventType.TAP))


class TestVcard:
    @pytest.mark.asyncio
    async def test_returns_file_and_records_download(self, service, analytics):
        filename, content = await service.get_vcard("jane-doe", session_id="s1")

        assert filename == "Jane_Doe.vcf"
        assert content.startswith("BEGIN:VCARD\r\n")
        assert analytics.record_event.call_args.args[1] == EventType.DOWNLOAD

    @pytest.mark.asyncio
    async def test_without_analytics(self, repository, templates, entitlements):
        service = ProfileService(repository, templates, entitlements, default_template_slug="modern")

        filename, _ = await service.get_vcard("jane-doe")

        assert filename == "Jane_Doe.vcf"


class TestTemplates:
    @pytest.mark.asyncio
    async def test_list(self, service):
        templates = await service.list_templates()
        assert [t.slug for t in templates] == ["modern"]

    @pytest.mark.asyncio
    async def test_inactive_template_not_found(self, service, templates):
        templates.get_by_slug.return_value = make_template(is_active=False)

        with pytest.raises(TemplateNotFoundError):
            await service.get_template("modern")
