from typing import Optional

import requests

from cost_tracker.exceptions import NotificationError
from cost_tracker.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_TIMEOUT = 10


class SlackNotifier:
    """
    Posts one-line status messages to a Slack incoming webhook.

    Without a webhook URL the notifier is disabled and every call is a no-op.
    Delivery problems are logged, never raised: a failed notification must not
    change the outcome of the cost run.
    """

    def __init__(self, webhook_url: Optional[str] = None, timeout: int = DEFAULT_TIMEOUT):
        self.webhook_url = webhook_url or None
        self.timeout = timeout

    @property
    def enabled(self) -> bool:
        return self.webhook_url is not None

    def _post(self, message: str) -> None:
        response = requests.post(
            self.webhook_url, json={"text": message}, timeout=self.timeout
        )
        if not response.ok:
            raise NotificationError(
                f"webhook returned {response.status_code}: {response.text}"
            )

    def notify(self, message: str) -> bool:
        """Returns True if the message was delivered."""
        if not self.enabled:
            logger.info("Slack webhook URL not configured. Skipping notification.")
            return False

        try:
            self._post(message)
        except (NotificationError, requests.exceptions.RequestException) as e:
            logger.error(f"Failed to send Slack notification: {e}")
            return False

        logger.info("Slack notification sent.")
        return True
