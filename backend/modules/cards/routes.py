"""
Card API endpoints.

Owners manage their NFC cards; the tap endpoints are public and are what
a phone reaches when it reads a card.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Header, Request
from fastapi.responses import RedirectResponse

from api.middleware.auth import get_current_user
from api.dependencies import get_card_service
from shared.models import AuthenticatedUser
from modules.profiles.routes import visitor_session_id

from .interfaces import ICardService
from .models import (
    Card,
    CardAnalytics,
    CardListResponse,
    CreateCardRequest,
    TapResult,
    UpdateCardRequest,
)

router = APIRouter()


@router.get("", response_model=CardListResponse)
async def list_cards(
    user: AuthenticatedUser = Depends(get_current_user),
    service: ICardService = Depends(get_card_service),
) -> CardListResponse:
    return await service.list_cards(user)


@router.post("", response_model=Card, status_code=201)
async def create_card(
    request: CreateCardRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: ICardService = Depends(get_card_service),
) -> Card:
    """
    Register a card for one of the user's profiles.

    Returns 403 with error LIMIT_EXCEEDED when the plan's card quota is
    used up.
    """
    return await service.create_card(user, request)


@router.get("/{card_id}", response_model=Card)
async def get_card(
    card_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: ICardService = Depends(get_card_service),
) -> Card:
    return await service.get_card(user, card_id)


@router.patch("/{card_id}", response_model=Card)
async def update_card(
    card_id: str,
    request: UpdateCardRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: ICardService = Depends(get_card_service),
) -> Card:
    """Update a card. Pass profile_id to point it at another profile."""
    return await service.update_card(user, card_id, request)


@router.delete("/{card_id}", status_code=204)
async def delete_card(
    card_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: ICardService = Depends(get_card_service),
) -> None:
    await service.delete_card(user, card_id)


@router.get("/{card_id}/analytics", response_model=CardAnalytics)
async def get_card_analytics(
    card_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: ICardService = Depends(get_card_service),
) -> CardAnalytics:
    """Tap totals, daily taps and device mix for one card."""
    return await service.get_card_analytics(user, card_id)


@router.post("/{card_code}/tap", response_model=TapResult)
async def tap_card(
    card_code: str,
    request: Request,
    user_agent: Optional[str] = Header(default=None),
    service: ICardService = Depends(get_card_service),
) -> TapResult:
    """Record a tap and return the profile URL the card points at."""
    return await service.tap(
        card_code,
        user_agent=user_agent,
        session_id=visitor_session_id(request),
    )


@router.get("/{card_code}/tap")
async def follow_card(
    card_code: str,
    request: Request,
    user_agent: Optional[str] = Header(default=None),
    service: ICardService = Depends(get_card_service),
) -> RedirectResponse:
    """Record a tap and redirect the browser to the profile page."""
    result = await service.tap(
        card_code,
        user_agent=user_agent,
        session_id=visitor_session_id(request),
    )
    return RedirectResponse(result.redirect_url, status_code=307)
