"""Custom exceptions for the Ref Poller."""


class PollerError(Exception):
    """Base exception for poller errors."""


class PollerStartupError(PollerError):
    """The monitored project could not be resolved when the poller started."""
