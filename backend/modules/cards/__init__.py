"""
Cards module.

Physical NFC cards that open a profile when tapped.

Public API:
- ICardService: Interface for card operations
- Card: Card model
- TapResult: Where a tapped card leads
"""

from .interfaces import ICardService
from .models import (
    Card,
    ChipType,
    CreateCardRequest,
    UpdateCardRequest,
    CardListResponse,
    TapResult,
    CardAnalytics,
)
from .exceptions import (
    CardError,
    CardNotFoundError,
    CardAccessDeniedError,
    CardInactiveError,
    CardProfileInvalidError,
    CardSerialConflictError,
)

__all__ = [
    # Interface
    "ICardService",
    # Models
    "Card",
    "ChipType",
    "CreateCardRequest",
    "UpdateCardRequest",
    "CardListResponse",
    "TapResult",
    "CardAnalytics",
    # Exceptions
    "CardError",
    "CardNotFoundError",
    "CardAccessDeniedError",
    "CardInactiveError",
    "CardProfileInvalidError",
    "CardSerialConflictError",
]
