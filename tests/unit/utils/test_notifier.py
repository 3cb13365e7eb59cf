from unittest.mock import MagicMock, patch

import pytest
import requests

from cost_tracker.utils.notifier import SlackNotifier

pytestmark = [pytest.mark.unit, pytest.mark.notify]

WEBHOOK = "https://hooks.slack.com/services/T000/B000/XXXX"


@pytest.fixture
def mock_requests():
    """Patches requests but keeps exceptions real."""
    with patch("cost_tracker.utils.notifier.requests") as mock_req:
        mock_req.exceptions.RequestException = requests.exceptions.RequestException
        yield mock_req


@pytest.mark.parametrize("url", [None, ""])
def test_disabled_without_url(mock_requests, url):
    notifier = SlackNotifier(url)

    assert notifier.enabled is False
    assert notifier.notify("anything at all") is False
    mock_requests.post.assert_not_called()


def test_posts_text_payload(mock_requests):
    mock_requests.post.return_value = MagicMock(ok=True, status_code=200, text="ok")

    assert SlackNotifier(WEBHOOK, timeout=5).notify("hello") is True

    mock_requests.post.assert_called_once_with(
        WEBHOOK, json={"text": "hello"}, timeout=5
    )


def test_http_error_status_is_swallowed(mock_requests):
    mock_requests.post.return_value = MagicMock(
        ok=False, status_code=404, text="no_service"
    )

    assert SlackNotifier(WEBHOOK).notify("hello") is False


def test_network_error_is_swallowed(mock_requests):
    mock_requests.post.side_effect = requests.exceptions.ConnectionError("down")

    assert SlackNotifier(WEBHOOK).notify("hello") is False
