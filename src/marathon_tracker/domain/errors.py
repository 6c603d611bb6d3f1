"""Error types raised by the analytics and adapters."""


class MarathonTrackerError(Exception):
    """Base class for application errors."""


class ComputationError(MarathonTrackerError):
    """Raised when an aggregation cannot be computed from its inputs."""


class InvalidConfigurationError(MarathonTrackerError):
    """Raised when required configuration has not been established."""


class IntervalsNotConfiguredError(MarathonTrackerError):
    """Raised when intervals.icu credentials are missing."""
