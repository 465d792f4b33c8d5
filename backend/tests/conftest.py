"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules.
"""

import pytest
from datetime import datetime, timezone, timedelta
from typing import Optional
from unittest.mock import patch
import jwt  # PyJWT

from api.app import create_app
from api.dependencies import reset_container
from shared.config import get_settings
from shared.models import AuthenticatedUser


# Test JWT secret (only for testing)
TEST_JWT_SECRET = "test-secret-key-for-testing-only"


def create_test_token(
    user_id: str = "test-user-123",
    email: str = "test@example.com",
    expired: bool = False,
    email_verified: bool = True,
    role: Optional[str] = None,
    organization_id: Optional[str] = None,
) -> str:
    """
    Create a test JWT token for authentication.

    Args:
        user_id: User ID to include in the token
        email: Email to include in the token
        expired: If True, creates an expired token
        email_verified: Whether the email should be marked as verified
        role: Application role placed in app_metadata
        organization_id: Organization placed in app_metadata

    Returns:
        JWT token string
    """
    now = datetime.now(timezone.utc)
    exp = now - timedelta(hours=1) if expired else now + timedelta(hours=1)

    app_metadata = {}
    if role:
        app_metadata["role"] = role
    if organization_id:
        app_metadata["organization_id"] = organization_id

    payload = {
        "sub": user_id,
        "email": email,
        "email_confirmed_at": now.isoformat() if email_verified else None,
        "aud": "authenticated",
        "role": "authenticated",
        "exp": int(exp.timestamp()),
        "iat": int(now.timestamp()),
        "app_metadata": app_metadata,
    }
    return jwt.encode(payload, TEST_JWT_SECRET, algorithm="HS256")


@pytest.fixture(autouse=True)
def reset_singletons():
    """Reset the service container and cached settings around each test."""
    reset_container()
    get_settings.cache_clear()
    yield
    reset_container()
    get_settings.cache_clear()


@pytest.fixture
def jwt_secret():
    """Make the auth middleware verify tokens with the test secret."""
    with patch("api.middleware.auth.get_settings") as mock_settings:
        mock_settings.return_value.supabase_jwt_secret = TEST_JWT_SECRET
        yield TEST_JWT_SECRET


@pytest.fixture
def app():
    """Create a fresh app for each test."""
    application = create_app()
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
def token_factory():
    """Build signed test tokens with custom claims."""
    return create_test_token


@pytest.fixture
def test_user_id() -> str:
    """Provide a consistent test user ID."""
    return "test-user-123"


@pytest.fixture
def test_user_email() -> str:
    """Provide a consistent test user email."""
    return "test@example.com"


@pytest.fixture
def auth_token(test_user_id: str, test_user_email: str) -> str:
    """Create a valid auth token for testing."""
    return create_test_token(user_id=test_user_id, email=test_user_email)


@pytest.fixture
def auth_headers(auth_token: str) -> dict[str, str]:
    """Create authorization headers with a valid token."""
    return {"Authorization": f"Bearer {auth_token}"}


@pytest.fixture
def user(test_user_id: str, test_user_email: str) -> AuthenticatedUser:
    """A user without an organization."""
    return AuthenticatedUser(id=test_user_id, email=test_user_email, email_verified=True)


@pytest.fixture
def org_user(test_user_email: str) -> AuthenticatedUser:
    """A member of organization org-1."""
    return AuthenticatedUser(
        id="org-user-1",
        email=test_user_email,
        email_verified=True,
        organization_id="org-1",
    )


@pytest.fixture
def org_admin(test_user_email: str) -> AuthenticatedUser:
    """An administrator of organization org-1."""
    return AuthenticatedUser(
        id="org-admin-1",
        email=test_user_email,
        email_verified=True,
        role="org_admin",
        organization_id="org-1",
    )
