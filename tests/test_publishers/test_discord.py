"""Tests for the Discord webhook notifier."""

import http.client
import json
import urllib.error
from unittest.mock import MagicMock, patch

import pytest

from autorelease.exceptions import NotificationError
from autorelease.publishers.discord import DiscordNotifier

URLOPEN = "autorelease.publishers.discord.urllib.request.urlopen"
WEBHOOK = "https://discord.com/api/webhooks/1/token"


class TestDiscordNotifier:
    """Tests for DiscordNotifier.notify."""

    @patch(URLOPEN)
    def test_posts_content(self, mock_urlopen: MagicMock) -> None:
        response = MagicMock()
        response.__enter__.return_value = response
        mock_urlopen.return_value = response

        DiscordNotifier(WEBHOOK).notify(":tada: Released 1.0.0 in octo/widgets")

        request = mock_urlopen.call_args[0][0]
        assert request.full_url == WEBHOOK
        assert request.get_method() == "POST"
        assert json.loads(request.data) == {"content": ":tada: Released 1.0.0 in octo/widgets"}

    @patch(URLOPEN)
    def test_rejected(self, mock_urlopen: MagicMock) -> None:
        mock_urlopen.side_effect = urllib.error.HTTPError(WEBHOOK, 404, "Unknown Webhook", {}, None)
        with pytest.raises(NotificationError) as exc_info:
            DiscordNotifier(WEBHOOK).notify("x")
        assert "404" in str(exc_info.value)

    @patch(URLOPEN)
    def test_unreachable(self, mock_urlopen: MagicMock) -> None:
        mock_urlopen.side_effect = urllib.error.URLError("timed out")
        with pytest.raises(NotificationError):
            DiscordNotifier(WEBHOOK).notify("x")

    def test_url_without_scheme(self) -> None:
        with pytest.raises(NotificationError) as exc_info:
            DiscordNotifier("discord.com/api/webhooks/1").notify("x")
        assert "Invalid webhook URL" in str(exc_info.value)

    @patch(URLOPEN)
    def test_connection_dropped(self, mock_urlopen: MagicMock) -> None:
        mock_urlopen.side_effect = http.client.RemoteDisconnected("closed")
        with pytest.raises(NotificationError) as exc_info:
            DiscordNotifier(WEBHOOK).notify("x")
        assert "RemoteDisconnected" in (exc_info.value.details or "")

    @patch(URLOPEN)
    def test_truncated_response(self, mock_urlopen: MagicMock) -> None:
        response = MagicMock()
        response.__enter__.return_value = response
        response.read.side_effect = http.client.IncompleteRead(b"")
        mock_urlopen.return_value = response
        with pytest.raises(NotificationError):
            DiscordNotifier(WEBHOOK).notify("x")
