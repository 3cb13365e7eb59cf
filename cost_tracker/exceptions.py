class CostTrackerError(Exception):
    """Base class for every fatal error raised by the cost tracker."""


class InvalidArgument(CostTrackerError, ValueError):
    """Raised when the lookback window is not a positive integer."""


class ConfigurationError(CostTrackerError):
    """Raised when the config file or the AWS client cannot be loaded."""


class CollaboratorError(CostTrackerError):
    """Raised when the Cost Explorer query fails."""


class NotificationError(CostTrackerError):
    """Raised internally when the webhook rejects a message."""


class PartialDataWarning(UserWarning):
    """A grouped entry was dropped because its metric was missing or incomplete."""

    def __init__(self, metric, service_name, start, end):
        self.metric = metric
        self.service_name = service_name
        self.start = start
        self.end = end
        super().__init__(str(self))

    def __str__(self):
        return (
            f"Metric '{self.metric}' not found or incomplete for service "
            f"'{self.service_name}' in period {self.start}-{self.end}"
        )
