"""
Cards module exceptions.
"""

from shared.exceptions import (
    BBTapError,
    NotFoundError,
    AuthorizationError,
    ConflictError,
    ValidationError,
)


class CardError(BBTapError):
    """Base exception for card-related errors."""

    pass


class CardNotFoundError(NotFoundError):
    """Raised when a card does not exist."""

    def __init__(self, card_id: str):
        super().__init__(
            f"Card not found: {card_id}",
            code="CARD_NOT_FOUND",
            details={"card_id": card_id},
        )


class CardAccessDeniedError(AuthorizationError):
    """Raised when a user tries to manage another user's card."""

    def __init__(self, card_id: str, user_id: str):
        super().__init__(
            f"Access denied to card: {card_id}",
            code="CARD_ACCESS_DENIED",
            details={"card_id": card_id, "user_id": user_id},
        )


class CardInactiveError(NotFoundError):
    """Raised when a deactivated card is tapped."""

    def __init__(self, card_id: str):
        super().__init__(
            f"Card is not active: {card_id}",
            code="CARD_INACTIVE",
            details={"card_id": card_id},
        )


class CardProfileInvalidError(ValidationError):
    """Raised when a card is assigned to a profile the user does not own."""

    def __init__(self, profile_id: str):
        super().__init__(
            f"Profile not found or not owned: {profile_id}",
            code="CARD_PROFILE_INVALID",
            details={"profile_id": profile_id},
        )


class CardSerialConflictError(ConflictError):
    """Raised when a chip serial number is already registered."""

    def __init__(self, serial_number: str):
        super().__init__(
            f"Card serial number already registered: {serial_number}",
            code="CARD_SERIAL_CONFLICT",
            details={"serial_number": serial_number},
        )
