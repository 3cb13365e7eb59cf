from typing import List

from cost_tracker.reports.costs import CostByTime

SEPARATOR = "====================================="
SERVICE_COLUMN_WIDTH = 30


def format_report(report: List[CostByTime], lookback_days: int) -> str:
    """Formats the per-period service costs as plain console text."""
    lines = [f"AWS Costs for the last {lookback_days} days:", SEPARATOR]
    if not report:
        lines.append("No cost data found for the specified period.")
        return "\n".join(lines) + "\n"

    for period in report:
        lines.append(f"Period: {period.start} to {period.end}")
        if not period.service_costs:
            lines.append("  No service costs found for this period.")
        for cost in period.service_costs:
            # Amounts stay as the API strings; no rounding
            lines.append(
                f"  {cost.service_name:<{SERVICE_COLUMN_WIDTH}}: {cost.amount} {cost.unit}"
            )
        lines.append("")

    return "\n".join(lines) + "\n"


def render(report: List[CostByTime], lookback_days: int) -> str:
    """Prints the report to stdout and returns the printed text."""
    text = format_report(report, lookback_days)
    print(text, end="")
    return text


def summarize(lookback_days: int) -> str:
    return f"Successfully fetched costs for the last {lookback_days} days."


def summarize_failure(error: Exception) -> str:
    return f"Cost tracker run failed: {error}"
