"""Custom exceptions for the metric store."""


class MetricError(Exception):
    """Write to an unknown series or with labels outside the allowed set."""
