"""Tests for Telegram delivery using the Bot API."""

from __future__ import annotations

import threading
from unittest.mock import MagicMock, patch

import pytest
import requests

from logrelay.delivery import DeliveryError, TelegramConfig, TelegramSink


def _response(status: int, text: str = "") -> MagicMock:
    resp = MagicMock()
    resp.status_code = status
    resp.text = text
    return resp


class TestTelegramConfig:
    """Test Telegram configuration dataclass."""

    def test_default_config(self) -> None:
        config = TelegramConfig(bot_token="123:abc", chat_id="42")
        assert config.api_base == "https://api.telegram.org"
        assert config.parse_mode == "Markdown"
        assert config.timeout == 10.0


class TestTelegramSink:
    """Test sink behaviour."""

    def test_url(self) -> None:
        sink = TelegramSink(TelegramConfig(bot_token="123:abc", chat_id="42"))
        assert sink.url == "https://api.telegram.org/bot123:abc/sendMessage"

    def test_url_custom_base_trailing_slash(self) -> None:
        sink = TelegramSink(
            TelegramConfig(bot_token="t", chat_id="1", api_base="http://localhost:8081/")
        )
        assert sink.url == "http://localhost:8081/bott/sendMessage"

    @patch("logrelay.delivery.requests.Session.post")
    def test_successful_delivery(self, mock_post: MagicMock) -> None:
        mock_post.return_value = _response(200, '{"ok":true}')
        sink = TelegramSink(TelegramConfig(bot_token="123:abc", chat_id="-100"))

        sink.deliver("From: *bot1*: down\n")

        mock_post.assert_called_once()
        call_args = mock_post.call_args
        assert call_args[0][0] == "https://api.telegram.org/bot123:abc/sendMessage"
        assert call_args[1]["json"] == {
            "chat_id": "-100",
            "text": "From: *bot1*: down\n",
            "parse_mode": "Markdown",
        }
        assert call_args[1]["timeout"] == 10.0

    @patch("logrelay.delivery.requests.Session.post")
    def test_non_200_raises(self, mock_post: MagicMock) -> None:
        mock_post.return_value = _response(400, '{"ok":false,"description":"Bad Request"}')
        sink = TelegramSink(TelegramConfig(bot_token="t", chat_id="1"))

        with pytest.raises(DeliveryError) as exc_info:
            sink.deliver("text")

        err = exc_info.value
        assert err.status_code == 400
        assert err.body == '{"ok":false,"description":"Bad Request"}'
        assert str(err) == (
            'non-OK response: 400, body: {"ok":false,"description":"Bad Request"}'
        )

    @patch("logrelay.delivery.requests.Session.post")
    def test_other_success_codes_are_failures(self, mock_post: MagicMock) -> None:
        mock_post.return_value = _response(204)
        sink = TelegramSink(TelegramConfig(bot_token="t", chat_id="1"))

        with pytest.raises(DeliveryError) as exc_info:
            sink.deliver("text")
        assert exc_info.value.status_code == 204

    @patch("logrelay.delivery.requests.Session.post")
    def test_transport_error_wrapped(self, mock_post: MagicMock) -> None:
        mock_post.side_effect = requests.ConnectionError("Connection refused")
        sink = TelegramSink(TelegramConfig(bot_token="t", chat_id="1"))

        with pytest.raises(DeliveryError) as exc_info:
            sink.deliver("text")

        assert exc_info.value.status_code is None
        assert "Connection refused" in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, requests.ConnectionError)

    def test_session_per_thread(self) -> None:
        sink = TelegramSink(TelegramConfig(bot_token="t", chat_id="1"))
        main_session = sink._session
        assert sink._session is main_session

        other: list[requests.Session] = []
        t = threading.Thread(target=lambda: other.append(sink._session))
        t.start()
        t.join()

        assert isinstance(other[0], requests.Session)
        assert other[0] is not main_session
