import os

import typer
from rich.console import Console

from cost_tracker.exceptions import CostTrackerError
from cost_tracker.reports.costs import DEFAULT_TIMEOUT, CostTracker, validate_days
from cost_tracker.utils.config import DEFAULT_DAYS, get_setting, resolve_days
from cost_tracker.utils.logger import get_logger
from cost_tracker.utils.notifier import SlackNotifier
from cost_tracker.utils.reporter import render, summarize, summarize_failure

logger = get_logger(__name__)
console = Console(stderr=True)


def get(
    ctx: typer.Context,
    days: int = typer.Option(
        None, "--days", "-d", help="Number of days to look back (default: 30)"
    ),
    webhook_url: str = typer.Option(
        None, "--webhook-url", help="Slack incoming webhook for the run summary"
    ),
    profile: str = typer.Option(None, "--profile", "-p", help="AWS profile name"),
    region: str = typer.Option(None, "--region", help="AWS region for the client"),
    timeout: int = typer.Option(
        None, "--timeout", help="Deadline in seconds for the Cost Explorer call"
    ),
):
    """Fetch AWS costs grouped by service and print them."""
    settings = ctx.obj or {}

    # 1. Notifications first, so config errors below can still be reported
    notifier = SlackNotifier(
        get_setting("slack_webhook_url", flag=webhook_url, config=settings)
    )

    try:
        # 2. Resolve the rest of the layered settings
        lookback_days = resolve_days(days, settings)
        validate_days(lookback_days)
        if get_setting("days", flag=days, config=settings) is None:
            console.print(
                f"[yellow]No number of days provided. Using default: {DEFAULT_DAYS} days.[/yellow]"
            )
        profile_name = get_setting("aws_profile", flag=profile, config=settings)
        region_name = get_setting(
            "aws_region", flag=region, config=settings, default=os.environ.get("AWS_REGION")
        )
        deadline = int(
            get_setting("timeout_seconds", flag=timeout, config=settings, default=DEFAULT_TIMEOUT)
        )

        # 3. Query Cost Explorer
        tracker = CostTracker.from_session(
            profile_name=profile_name, region_name=region_name, timeout=deadline
        )
        report = tracker.get_costs_by_service(lookback_days)
    except (CostTrackerError, ValueError, TypeError) as e:
        logger.error(f"Error getting costs: {e}")
        notifier.notify(summarize_failure(e))
        raise typer.Exit(code=1)

    # 4. Output
    render(report, lookback_days)
    notifier.notify(summarize(lookback_days))
