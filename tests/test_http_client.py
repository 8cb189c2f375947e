"""Tests for the shared HTTP helpers."""

from unittest.mock import MagicMock, patch

import requests

from common.http_client import get_json, robust_get
from constants import Constants


def _response(status_code=200, text="", headers=None):
    return MagicMock(status_code=status_code, text=text, headers=headers or {})


class TestRobustGet:
    """Tests for robust_get."""

    @patch("common.http_client.requests.get")
    def test_success_is_cached(self, mock_get):
        mock_get.return_value = _response(200, "hello", {"X-Test": "1"})
        assert robust_get("https://example.test/a", params={"q": "1"}) == (200, {"X-Test": "1"}, "hello")
        assert robust_get("https://example.test/a", params={"q": "1"}) == (200, {"X-Test": "1"}, "hello")
        assert mock_get.call_count == 1
        assert mock_get.call_args.kwargs["timeout"] == Constants.REQUEST_TIMEOUT

    @patch("common.http_client.requests.get")
    def test_params_are_part_of_cache_key(self, mock_get):
        mock_get.return_value = _response(200, "x")
        robust_get("https://example.test/a", params={"q": "1"})
        robust_get("https://example.test/a", params={"q": "2"})
        assert mock_get.call_count == 2

    @patch("common.http_client.requests.get")
    def test_server_errors_not_cached(self, mock_get):
        mock_get.return_value = _response(503, "")
        robust_get("https://example.test/b")
        robust_get("https://example.test/b")
        assert mock_get.call_count == 2

    @patch("common.http_client.requests.get")
    def test_client_errors_not_cached(self, mock_get):
        mock_get.return_value = _response(404, "missing")
        assert robust_get("https://example.test/gone")[0] == 404
        assert robust_get("https://example.test/gone")[0] == 404
        assert mock_get.call_count == 2

    @patch("common.http_client.requests.get")
    def test_retries_then_gives_up(self, mock_get):
        mock_get.side_effect = requests.Timeout()
        status, headers, body = robust_get("https://example.test/c")
        assert status == 0
        assert headers == {}
        assert "timeout" in body
        assert mock_get.call_count == Constants.HTTP_RETRY_MAX

    @patch("common.http_client.requests.get")
    def test_recovers_after_connection_error(self, mock_get):
        mock_get.side_effect = [requests.ConnectionError("reset"), _response(200, "ok")]
        assert robust_get("https://example.test/d")[0] == 200


class TestGetJson:
    """Tests for get_json."""

    @patch("common.http_client.requests.get")
    def test_parses_json(self, mock_get):
        mock_get.return_value = _response(200, '{"results": []}')
        assert get_json("https://example.test/j")[2] == {"results": []}

    @patch("common.http_client.requests.get")
    def test_invalid_json(self, mock_get):
        mock_get.return_value = _response(200, "<html>")
        status, _, data = get_json("https://example.test/k")
        assert status == 200
        assert data is None

    @patch("common.http_client.requests.get")
    def test_error_status(self, mock_get):
        mock_get.return_value = _response(404, '{"message": "nope"}')
        assert get_json("https://example.test/l")[::2] == (404, None)
