import datetime
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol, Tuple

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError

from cost_tracker.exceptions import (
    CollaboratorError,
    ConfigurationError,
    InvalidArgument,
    PartialDataWarning,
)
from cost_tracker.utils.logger import get_logger

AWS_DATE_FORMAT = "%Y-%m-%d"
METRIC_BLENDED_COST = "BlendedCost"
GRANULARITY_MONTHLY = "MONTHLY"
GROUP_BY_TYPE = "DIMENSION"
GROUP_BY_KEY = "SERVICE"
DEFAULT_TIMEOUT = 300
MAX_ATTEMPTS = 3
UNKNOWN_SERVICE = "N/A"

# Cost Explorer is only served from us-east-1
CE_REGION = "us-east-1"


@dataclass(frozen=True)
class ServiceCost:
    service_name: str
    amount: str
    unit: str


@dataclass(frozen=True)
class CostByTime:
    start: str
    end: str
    service_costs: Tuple[ServiceCost, ...] = ()


def validate_days(lookback_days) -> None:
    if isinstance(lookback_days, bool) or not isinstance(lookback_days, int):
        raise InvalidArgument(f"days must be a positive integer, got {lookback_days!r}")
    if lookback_days <= 0:
        raise InvalidArgument(f"days must be a positive integer, got {lookback_days}")


def deadline_config(timeout: float, max_attempts: int = MAX_ATTEMPTS) -> Config:
    """
    Client config whose worst case (every attempt hitting both the connect and
    the read timeout) stays inside `timeout` seconds.
    """
    # Whole milliseconds, rounded down
    per_attempt = math.floor(timeout * 1000 / (2 * max_attempts)) / 1000
    return Config(
        connect_timeout=per_attempt,
        read_timeout=per_attempt,
        retries={"total_max_attempts": max_attempts, "mode": "standard"},
    )


class CostExplorerAPI(Protocol):
    def get_cost_and_usage(self, **kwargs) -> Dict[str, Any]: ...


class CostTracker:
    """Queries Cost Explorer and flattens the response into per-period service costs."""

    def __init__(self, client: CostExplorerAPI, logger=None):
        self.client = client
        self.logger = logger if logger is not None else get_logger(__name__)

    @classmethod
    def from_session(
        cls,
        profile_name: Optional[str] = None,
        region_name: Optional[str] = None,
        timeout: int = DEFAULT_TIMEOUT,
        logger=None,
    ) -> "CostTracker":
        """
        Builds a tracker backed by a real boto3 'ce' client.
        Credentials come from the default chain (env, profile, IRSA web identity).
        """
        try:
            session = boto3.Session(profile_name=profile_name)
            if session.get_credentials() is None:
                raise ConfigurationError(
                    "unable to load SDK config: no AWS credentials found"
                )
            client = session.client(
                "ce",
                region_name=region_name or session.region_name or CE_REGION,
                config=deadline_config(timeout),
            )
        except BotoCoreError as e:
            raise ConfigurationError(f"unable to load SDK config: {e}") from e

        return cls(client, logger=logger)

    @staticmethod
    def build_query(lookback_days: int, now: datetime.datetime) -> Dict[str, Any]:
        """Keyword arguments for a single get_cost_and_usage call."""
        end_date = now
        start_date = end_date - datetime.timedelta(days=lookback_days)
        return {
            "TimePeriod": {
                "Start": start_date.strftime(AWS_DATE_FORMAT),
                "End": end_date.strftime(AWS_DATE_FORMAT),
            },
            "Granularity": GRANULARITY_MONTHLY,
            "Metrics": [METRIC_BLENDED_COST],
            "GroupBy": [{"Type": GROUP_BY_TYPE, "Key": GROUP_BY_KEY}],
        }

    def get_costs_by_service(
        self, lookback_days: int, now: Optional[datetime.datetime] = None
    ) -> List[CostByTime]:
        """
        Retrieves costs grouped by service for the last `lookback_days` days.

        Returns one CostByTime per time bucket, in the order Cost Explorer
        returned them. Entries without a complete BlendedCost metric are
        skipped with a warning. Raises InvalidArgument before any API call
        when the window is not positive, and CollaboratorError when the
        query itself fails.
        """
        validate_days(lookback_days)

        query = self.build_query(lookback_days, now or datetime.datetime.now())

        try:
            response = self.client.get_cost_and_usage(**query)
        except Exception as e:
            # Auth, throttling, network and validation errors all end the run
            raise CollaboratorError(
                f"failed to get cost data from AWS Cost Explorer: {e}"
            ) from e

        try:
            return [self._parse_bucket(bucket) for bucket in response.get("ResultsByTime", [])]
        except (KeyError, TypeError, AttributeError) as e:
            raise CollaboratorError(
                f"failed to get cost data from AWS Cost Explorer: malformed response ({e!r})"
            ) from e

    def _parse_bucket(self, bucket: Dict[str, Any]) -> CostByTime:
        start = bucket["TimePeriod"]["Start"]
        end = bucket["TimePeriod"]["End"]

        service_costs = []
        for group in bucket.get("Groups", []):
            keys = group.get("Keys") or []
            service_name = keys[0] if keys else UNKNOWN_SERVICE

            metric = (group.get("Metrics") or {}).get(METRIC_BLENDED_COST) or {}
            amount = metric.get("Amount")
            unit = metric.get("Unit")
            if amount is None or unit is None:
                self.logger.warning(
                    "%s", PartialDataWarning(METRIC_BLENDED_COST, service_name, start, end)
                )
                continue

            service_costs.append(ServiceCost(service_name, amount, unit))

        return CostByTime(start=start, end=end, service_costs=tuple(service_costs))


def build_report(
    lookback_days: int,
    now: Optional[datetime.datetime] = None,
    client: Optional[CostExplorerAPI] = None,
    logger=None,
) -> List[CostByTime]:
    """Shortcut used by scripts: build a tracker (real client unless given) and run it."""
    validate_days(lookback_days)
    if client is None:
        tracker = CostTracker.from_session(logger=logger)
    else:
        tracker = CostTracker(client, logger=logger)
    return tracker.get_costs_by_service(lookback_days, now=now)
