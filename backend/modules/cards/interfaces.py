"""
Cards module interface.
"""

from typing import Optional, Protocol, runtime_checkable

from shared.models import AuthenticatedUser

from .models import (
    Card,
    CardAnalytics,
    CardListResponse,
    CreateCardRequest,
    TapResult,
    UpdateCardRequest,
)


@runtime_checkable
class ICardService(Protocol):
    """Interface for NFC card management and taps."""

    async def list_cards(self, user: AuthenticatedUser) -> CardListResponse:
        """List the user's cards, newest first."""
        ...

    async def get_card(self, user: AuthenticatedUser, card_id: str) -> Card:
        """
        Get one of the user's cards by record ID.

        Raises:
            CardNotFoundError: If the card does not exist
            CardAccessDeniedError: If the user does not own it
        """
        ...

    async def create_card(self, user: AuthenticatedUser, request: CreateCardRequest) -> Card:
        """
        Register a card and assign it to one of the user's profiles.

        Raises:
            LimitExceededError: If the plan's card quota is used up
            CardProfileInvalidError: If the profile is not the user's
            CardSerialConflictError: If the serial number is taken
        """
        ...

    async def update_card(
        self,
        user: AuthenticatedUser,
        card_id: str,
        request: UpdateCardRequest,
    ) -> Card:
        """Update a card, reassigning it when profile_id is given."""
        ...

    async def delete_card(self, user: AuthenticatedUser, card_id: str) -> None:
        """Delete a card and release its quota."""
        ...

    async def tap(
        self,
        card_code: str,
        *,
        user_agent: Optional[str] = None,
        session_id: Optional[str] = None,
    ) -> TapResult:
        """
        Handle a physical tap of a card.

        Increments the card's tap count and the profile's card taps.

        Raises:
            CardNotFoundError: If no card has this code
            CardInactiveError: If the card is deactivated
            ProfileNotFoundError: If the assigned profile is unpublished
        """
        ...

    async def get_card_analytics(self, user: AuthenticatedUser, card_id: str) -> CardAnalytics:
        """Tap history of one card."""
        ...
