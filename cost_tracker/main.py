#!/usr/bin/env python3
import typer

from cost_tracker.commands import costs
from cost_tracker.exceptions import ConfigurationError
from cost_tracker.utils.config import get_setting, load_config
from cost_tracker.utils.logger import LogFormat, get_logger, set_log_format
from cost_tracker.utils.notifier import SlackNotifier
from cost_tracker.utils.reporter import summarize_failure

app = typer.Typer(help="AWS Cost Tracker")
logger = get_logger(__name__)

# Register Subcommands
app.command("get")(costs.get)


@app.callback()
def cli_config(
        ctx: typer.Context,
        log_format: LogFormat = typer.Option(
            LogFormat.json,
            "--log-format",
            envvar="LOG_FORMAT",
            case_sensitive=False,
            help="Log output format",
        ),
        config_path: str = typer.Option(
            None, "--config", "-c", help="Path to cost-tracker-config.json"
        ),
):
    """
    Global configuration.
    """
    set_log_format(log_format.value)

    # Static settings; flags and COSTTRACKER_* env vars override them per command
    try:
        ctx.obj = load_config(config_path)
    except ConfigurationError as e:
        logger.error(f"Failed to load configuration: {e}")
        # Only the environment can supply the webhook at this point
        SlackNotifier(get_setting("slack_webhook_url")).notify(summarize_failure(e))
        raise typer.Exit(code=1)


def main():
    app()


if __name__ == "__main__":
    main()
