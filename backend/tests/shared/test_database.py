"""Tests for shared/database.py."""

import os

import pytest
from unittest.mock import patch, MagicMock

from shared.database import get_supabase_client, reset_client_cache


SUPABASE_URL = os.environ.get("SUPABASE_URL", "")
SUPABASE_SERVICE_ROLE_KEY = os.environ.get("SUPABASE_SERVICE_ROLE_KEY", "")


@pytest.fixture(autouse=True)
def clear_client_cache():
    reset_client_cache()
    yield
    reset_client_cache()


class TestSupabaseClient:

    @patch("shared.database.create_client")
    @patch("shared.database.get_settings")
    def test_creates_service_client(self, mock_settings, mock_create):
        """Should create client with service role key."""
        mock_settings.return_value.supabase_url = "https://test.supabase.co"
        mock_settings.return_value.supabase_service_role_key = "test-key"
        mock_create.return_value = MagicMock()

        client = get_supabase_client()

        mock_create.assert_called_once_with("https://test.supabase.co", "test-key")
        assert client is mock_create.return_value

    @patch("shared.database.create_client")
    @patch("shared.database.get_settings")
    def test_caches_client(self, mock_settings, mock_create):
        mock_settings.return_value.supabase_url = "https://test.supabase.co"
        mock_settings.return_value.supabase_service_role_key = "test-key"

        assert get_supabase_client() is get_supabase_client()
        mock_create.assert_called_once()

    @pytest.mark.parametrize(
        "url,key",
        [("", ""), ("", "test-key"), ("https://test.supabase.co", "")],
    )
    @patch("shared.database.get_settings")
    def test_raises_without_config(self, mock_settings, url, key):
        mock_settings.return_value.supabase_url = url
        mock_settings.return_value.supabase_service_role_key = key

        with pytest.raises(RuntimeError, match="configuration missing"):
            get_supabase_client()

    @patch("shared.database.create_client")
    @patch("shared.database.get_settings")
    def test_reset_client_cache(self, mock_settings, mock_create):
        """Should reset the cache and allow new client creation."""
        mock_settings.return_value.supabase_url = "https://test.supabase.co"
        mock_settings.return_value.supabase_service_role_key = "test-key"
        mock_create.side_effect = [MagicMock(name="client1"), MagicMock(name="client2")]

        client1 = get_supabase_client()
        reset_client_cache()
        client2 = get_supabase_client()

        assert mock_create.call_count == 2
        assert client1 is not client2


@pytest.mark.skipif(
    not SUPABASE_URL or not SUPABASE_SERVICE_ROLE_KEY,
    reason="SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY environment variables not set"
)
class TestSupabaseIntegration:
    """Integration tests requiring real Supabase credentials.

    Skipped by default. To run them:
        SUPABASE_URL=https://xxx.supabase.co SUPABASE_SERVICE_ROLE_KEY=xxx \
            pytest backend/tests/shared/test_database.py -k Integration
    """

    def test_templates_table_is_readable(self):
        client = get_supabase_client()
        response = client.table("templates").select("id").limit(1).execute()
        assert response.data is not None
