"""
Profile, template and public profile API endpoints.

Owner routes require a bearer token. Public routes serve published
profiles to visitors and record what they do.
"""

import base64
from typing import Optional

from fastapi import APIRouter, Depends, Header, Query, Request, Response

from api.middleware.auth import get_current_user
from api.dependencies import get_profile_service
from shared.models import AuthenticatedUser
from modules.analytics.models import RecordEventRequest, RecordEventResponse

from .interfaces import IProfileService
from .models import (
    CreateProfileRequest,
    EffectiveView,
    Profile,
    ProfileListResponse,
    Template,
    UpdateProfileRequest,
)

router = APIRouter()
templates_router = APIRouter()
public_router = APIRouter()


def visitor_session_id(request: Request) -> str:
    """
    Session key for a visitor without an explicit session.

    Client address plus a prefix of the encoded user agent, so repeat
    views from the same browser are recognised.
    """
    forwarded = request.headers.get("x-forwarded-for")
    address = forwarded.split(",")[0].strip() if forwarded else None
    if not address and request.client:
        address = request.client.host
    user_agent = request.headers.get("user-agent", "")
    encoded = base64.b64encode(user_agent.encode("utf-8")).decode("ascii")[:20]
    return f"{address or 'unknown'}_{encoded}"


# =============================================================================
# Owner routes
# =============================================================================


@router.get("", response_model=ProfileListResponse)
async def list_profiles(
    user: AuthenticatedUser = Depends(get_current_user),
    service: IProfileService = Depends(get_profile_service),
) -> ProfileListResponse:
    """List the current user's profiles, oldest first."""
    return await service.list_profiles(user)


@router.post("", response_model=Profile, status_code=201)
async def create_profile(
    request: CreateProfileRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IProfileService = Depends(get_profile_service),
) -> Profile:
    """
    Create a new profile.

    Returns 403 with error LIMIT_EXCEEDED when the plan's profile quota
    is used up.
    """
    return await service.create_profile(user, request)


@router.get("/{profile_id}", response_model=Profile)
async def get_profile(
    profile_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IProfileService = Depends(get_profile_service),
) -> Profile:
    return await service.get_profile(user, profile_id)


@router.patch("/{profile_id}", response_model=Profile)
async def update_profile(
    profile_id: str,
    request: UpdateProfileRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IProfileService = Depends(get_profile_service),
) -> Profile:
    """Update a profile. Fields left out are unchanged; the slug is fixed."""
    return await service.update_profile(user, profile_id, request)


@router.delete("/{profile_id}", status_code=204)
async def delete_profile(
    profile_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IProfileService = Depends(get_profile_service),
) -> None:
    await service.delete_profile(user, profile_id)


@router.get("/{profile_id}/preview", response_model=EffectiveView)
async def preview_profile(
    profile_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IProfileService = Depends(get_profile_service),
) -> EffectiveView:
    """Render the profile as visitors will see it, without counting a view."""
    return await service.preview_profile(user, profile_id)


# =============================================================================
# Templates
# =============================================================================


@templates_router.get("", response_model=list[Template])
async def list_templates(
    service: IProfileService = Depends(get_profile_service),
) -> list[Template]:
    """List active templates, most used first."""
    return await service.list_templates()


@templates_router.get("/{slug}", response_model=Template)
async def get_template(
    slug: str,
    service: IProfileService = Depends(get_profile_service),
) -> Template:
    return await service.get_template(slug)


# =============================================================================
# Public routes
# =============================================================================


@public_router.get("/{slug}", response_model=EffectiveView)
async def get_public_profile(
    slug: str,
    request: Request,
    source: Optional[str] = Query(default=None, description="nfc, qr, direct, social, search or other"),
    user_agent: Optional[str] = Header(default=None),
    referer: Optional[str] = Header(default=None),
    service: IProfileService = Depends(get_profile_service),
) -> EffectiveView:
    """
    Get a published profile ready to render.

    Counts a view, once per visitor session within the dedupe window.
    """
    return await service.get_public_view(
        slug,
        source=source,
        user_agent=user_agent,
        session_id=visitor_session_id(request),
        referrer=referer,
    )


@public_router.post("/{slug}/events", response_model=RecordEventResponse, status_code=202)
async def record_public_event(
    slug: str,
    event: RecordEventRequest,
    request: Request,
    user_agent: Optional[str] = Header(default=None),
    service: IProfileService = Depends(get_profile_service),
) -> RecordEventResponse:
    """Record a tap, click, download, share or other visitor event."""
    return await service.record_public_event(
        slug,
        event,
        user_agent=user_agent,
        session_id=visitor_session_id(request),
    )


@public_router.get("/{slug}/vcard")
async def download_vcard(
    slug: str,
    request: Request,
    user_agent: Optional[str] = Header(default=None),
    service: IProfileService = Depends(get_profile_service),
) -> Response:
    """Download the profile as a vCard contact file."""
    filename, content = await service.get_vcard(
        slug,
        user_agent=user_agent,
        session_id=visitor_session_id(request),
    )
    return Response(
        content=content,
        media_type="text/vcard; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
