"""
Tests for card endpoints.
"""

import pytest
from unittest.mock import AsyncMock
from fastapi.testclient import TestClient

from api.dependencies import get_card_service
from modules.analytics.models import DeviceBreakdown
from modules.cards.exceptions import CardInactiveError, CardNotFoundError, CardSerialConflictError
from modules.cards.models import Card, CardAnalytics, CardListResponse, TapResult
from modules.entitlements.exceptions import LimitExceededError


def make_card(**overrides) -> Card:
    data = {"id": "c1", "user_id": "test-user-123", "profile_id": "p1", "card_id": "ABCD1234"}
    data.update(overrides)
    return Card(**data)


TAP = TapResult(
    card_id="ABCD1234",
    profile_slug="jane-doe",
    redirect_url="https://bbtap.example/p/jane-doe",
    tap_count=5,
)


@pytest.fixture
def mock_service(app):
    service = AsyncMock()
    app.dependency_overrides[get_card_service] = lambda: service
    return service


@pytest.fixture
def client(app, jwt_secret):
    return TestClient(app)


class TestOwnerRoutes:
    """Tests for /api/cards"""

    def test_requires_auth(self, app, mock_service):
        assert TestClient(app).get("/api/cards").status_code == 401

    def test_list(self, client, mock_service, auth_headers):
        mock_service.list_cards.return_value = CardListResponse(cards=[make_card()], total=1)

        response = client.get("/api/cards", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["cards"][0]["chip_type"] == "NTAG215"

    def test_create(self, client, mock_service, auth_headers):
        mock_service.create_card.return_value = make_card()

        response = client.post("/api/cards", headers=auth_headers, json={"profile_id": "p1"})

        assert response.status_code == 201
        assert response.json()["card_id"] == "ABCD1234"

    def test_create_invalid_chip(self, client, mock_service, auth_headers):
        response = client.post(
            "/api/cards",
            headers=auth_headers,
            json={"profile_id": "p1", "chip_type": "NTAG999"},
        )
        assert response.status_code == 422

    def test_create_over_limit(self, client, mock_service, auth_headers):
        mock_service.create_card.side_effect = LimitExceededError("cards", 5, 5, organization_id="org-1")

        response = client.post("/api/cards", headers=auth_headers, json={"profile_id": "p1"})

        assert response.status_code == 403
        assert response.json()["details"]["organization_id"] == "org-1"

    def test_update_serial_conflict(self, client, mock_service, auth_headers):
        mock_service.update_card.side_effect = CardSerialConflictError("04:A2")

        response = client.patch("/api/cards/c1", headers=auth_headers, json={"serial_number": "04:A2"})

        assert response.status_code == 409

    def test_delete(self, client, mock_service, auth_headers):
        mock_service.delete_card.return_value = None

        response = client.delete("/api/cards/c1", headers=auth_headers)

        assert response.status_code == 204

    def test_analytics(self, client, mock_service, auth_headers):
        mock_service.get_card_analytics.return_value = CardAnalytics(
            card_id="ABCD1234",
            total_taps=3,
            daily_taps={"2024-03-01": 3},
            device_breakdown=DeviceBreakdown(mobile=3, total=3),
        )

        response = client.get("/api/cards/c1/analytics", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["daily_taps"] == {"2024-03-01": 3}


class TestTapRoutes:
    """Tests for the public tap endpoints"""

    def test_post_tap(self, app, mock_service):
        mock_service.tap.return_value = TAP

        response = TestClient(app).post("/api/cards/ABCD1234/tap")

        assert response.status_code == 200
        assert response.json()["redirect_url"] == "https://bbtap.example/p/jane-doe"
        args, kwargs = mock_service.tap.call_args
        assert args == ("ABCD1234",)
        assert kwargs["session_id"].startswith("testclient_")

    def test_get_tap_redirects(self, app, mock_service):
        mock_service.tap.return_value = TAP

        response = TestClient(app).get("/api/cards/ABCD1234/tap", follow_redirects=False)

        assert response.status_code == 307
        assert response.headers["location"] == "https://bbtap.example/p/jane-doe"

    def test_inactive_card(self, app, mock_service):
        mock_service.tap.side_effect = CardInactiveError("ABCD1234")

        response = TestClient(app).post("/api/cards/ABCD1234/tap")

        assert response.status_code == 404
        assert response.json()["error"] == "CARD_INACTIVE"

    def test_unknown_card(self, app, mock_service):
        mock_service.tap.side_effect = CardNotFoundError("NOPE")

        response = TestClient(app).get("/api/cards/NOPE/tap", follow_redirects=False)

        assert response.status_code == 404
