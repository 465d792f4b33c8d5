"""
Profiles module exceptions.
"""

from shared.exceptions import (
    BBTapError,
    NotFoundError,
    AuthorizationError,
    ValidationError,
)


class ProfileError(BBTapError):
    """Base exception for profile-related errors."""

    pass


class ProfileNotFoundError(NotFoundError):
    """Raised when a profile does not exist or is not published."""

    def __init__(self, identifier: str):
        super().__init__(
            f"Profile not found: {identifier}",
            code="PROFILE_NOT_FOUND",
            details={"profile": identifier},
        )


class ProfileAccessDeniedError(AuthorizationError):
    """Raised when a user tries to access another user's profile."""

    def __init__(self, profile_id: str, user_id: str):
        super().__init__(
            f"Access denied to profile: {profile_id}",
            code="PROFILE_ACCESS_DENIED",
            details={"profile_id": profile_id, "user_id": user_id},
        )


class TemplateNotFoundError(NotFoundError):
    """Raised when a template does not exist."""

    def __init__(self, identifier: str):
        super().__init__(
            f"Template not found: {identifier}",
            code="TEMPLATE_NOT_FOUND",
            details={"template": identifier},
        )


class InvalidTemplateError(ValidationError):
    """Raised when a profile references an unknown or inactive template."""

    def __init__(self, template_id: str):
        super().__init__(
            f"Invalid template: {template_id}",
            code="INVALID_TEMPLATE",
            details={"template_id": template_id},
        )
