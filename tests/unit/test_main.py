from unittest.mock import MagicMock, patch

import pytest
from typer.testing import CliRunner

from cost_tracker.exceptions import ConfigurationError
from cost_tracker.main import app

runner = CliRunner()

pytestmark = pytest.mark.unit


def test_subcommands_registered():
    """Verify the get subcommand is visible in the help output."""
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "get" in result.stdout


@patch("cost_tracker.main.load_config")
@patch("cost_tracker.main.set_log_format")
def test_log_format_callback(mock_log_format, mock_load):
    """Verify the log format global option calls the utility function."""
    mock_load.return_value = {}
    runner.invoke(app, ["--log-format", "text", "get", "--help"])
    mock_log_format.assert_called_once_with("text")


@patch("cost_tracker.main.load_config")
def test_config_path_passed_to_loader(mock_load):
    mock_load.return_value = {}
    runner.invoke(app, ["--config", "/etc/cost-tracker.json", "get", "--help"])
    mock_load.assert_called_once_with("/etc/cost-tracker.json")


@patch("cost_tracker.utils.notifier.requests.post")
@patch("cost_tracker.main.load_config")
@patch("cost_tracker.commands.costs.CostTracker")
def test_bad_config_file_exits_non_zero(mock_tracker_cls, mock_load, mock_post, clean_env):
    """A broken config file still reports the failure to the env-configured webhook."""
    clean_env.setenv("COSTTRACKER_SLACK_WEBHOOK_URL", "https://hooks.example/env")
    mock_post.return_value = MagicMock(ok=True, status_code=200, text="ok")
    mock_load.side_effect = ConfigurationError("config file broken.json must contain a JSON object")

    result = runner.invoke(app, ["get"])

    assert result.exit_code == 1
    mock_tracker_cls.from_session.assert_not_called()
    mock_post.assert_called_once()
    args, kwargs = mock_post.call_args
    assert args[0] == "https://hooks.example/env"
    assert kwargs["json"]["text"].startswith("Cost tracker run failed:")


@patch("cost_tracker.utils.notifier.requests.post")
@patch("cost_tracker.main.load_config")
def test_bad_config_file_without_webhook_posts_nothing(mock_load, mock_post, clean_env):
    mock_load.side_effect = ConfigurationError("bad json")

    result = runner.invoke(app, ["get"])

    assert result.exit_code == 1
    mock_post.assert_not_called()


def test_main_invocation():
    """Smoke test for the main() entry point."""
    from cost_tracker.main import main

    with patch("cost_tracker.main.app") as mock_app:
        main()
        mock_app.assert_called_once()
