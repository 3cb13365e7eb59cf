import logging

import pytest

from cost_tracker.utils.logger import PARENT_LOGGER


@pytest.fixture(autouse=True)
def reset_parent_logger():
    """CliRunner swaps stdout; drop handlers bound to a closed stream."""
    yield
    parent = logging.getLogger(PARENT_LOGGER)
    for h in parent.handlers[:]:
        parent.removeHandler(h)


@pytest.fixture
def clean_env(monkeypatch):
    """Removes COSTTRACKER_* settings inherited from the developer's shell."""
    for key in (
        "COSTTRACKER_DAYS",
        "COSTTRACKER_SLACK_WEBHOOK_URL",
        "COSTTRACKER_AWS_PROFILE",
        "COSTTRACKER_AWS_REGION",
        "COSTTRACKER_TIMEOUT_SECONDS",
    ):
        monkeypatch.delenv(key, raising=False)
    return monkeypatch
