"""MetricStore - Process-wide set of pipeline series backed by prometheus_client."""

from __future__ import annotations

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Gauge,
    generate_latest,
)
from prometheus_client.core import UnknownMetricFamily

from pipeline_exporter.metrics.exceptions import MetricError

TIME_SINCE_LAST_RUN = "gitlab_ci_pipeline_time_since_last_run_seconds"
LAST_RUN_DURATION = "gitlab_ci_pipeline_last_run_duration_seconds"
RUN_COUNT = "gitlab_ci_pipeline_run_count"
PIPELINE_STATUS = "gitlab_ci_pipeline_status"

# Only these statuses get a pipeline_status series
TRACKED_STATUSES = ("success", "failed", "running")

_RUN_COUNT_HELP = "GitLab CI pipeline run count"

_REF_LABELS = ("project", "ref")
_STATUS_LABELS = ("project", "ref", "status")


class _BareCounterCollector:
    """Exposes a labeled Counter under its own name.

    The text format renames counter families to <name>_total and adds
    <name>_created samples. Scrapers of this exporter expect the bare name,
    so the samples are re-emitted as an untyped family.
    """

    def __init__(self, counter: Counter, name: str, documentation: str) -> None:
        self._counter = counter
        self._name = name
        self._documentation = documentation

    def collect(self):
        family = UnknownMetricFamily(self._name, self._documentation, labels=_REF_LABELS)
        for metric in self._counter.collect():
            for sample in metric.samples:
                if sample.name == f"{self._name}_total":
                    family.add_metric([sample.labels[n] for n in _REF_LABELS], sample.value)
        yield family


class MetricStore:
    """Labeled gauges and counters written by pollers and read by the scrape endpoint.

    Each (series, labels) pair is a prometheus_client child with its own
    lock, so writes to one key never wait on writes to another. Children are
    created on first write and kept for the life of the store.
    """

    content_type = CONTENT_TYPE_LATEST

    def __init__(self) -> None:
        self.registry = CollectorRegistry()
        self._families: dict[str, Gauge | Counter] = {
            TIME_SINCE_LAST_RUN: Gauge(
                TIME_SINCE_LAST_RUN,
                "Elapsed time since most recent GitLab CI pipeline run.",
                _REF_LABELS,
                registry=self.registry,
            ),
            LAST_RUN_DURATION: Gauge(
                LAST_RUN_DURATION,
                "Duration of last pipeline run",
                _REF_LABELS,
                registry=self.registry,
            ),
            RUN_COUNT: Counter(RUN_COUNT, _RUN_COUNT_HELP, _REF_LABELS, registry=None),
            PIPELINE_STATUS: Gauge(
                PIPELINE_STATUS,
                "GitLab CI pipeline current status",
                _STATUS_LABELS,
                registry=self.registry,
            ),
        }
        self.registry.register(
            _BareCounterCollector(self._families[RUN_COUNT], RUN_COUNT, _RUN_COUNT_HELP)
        )
        self._label_names = {
            TIME_SINCE_LAST_RUN: _REF_LABELS,
            LAST_RUN_DURATION: _REF_LABELS,
            RUN_COUNT: _REF_LABELS,
            PIPELINE_STATUS: _STATUS_LABELS,
        }

    def _check(self, series: str, labels: tuple[str, ...]) -> Gauge | Counter:
        family = self._families.get(series)
        if family is None:
            raise MetricError(f"Unknown series '{series}'")
        expected = self._label_names[series]
        if len(labels) != len(expected):
            raise MetricError(
                f"Series '{series}' takes labels {expected}, got {len(labels)} value(s)"
            )
        if series == PIPELINE_STATUS and labels[2] not in TRACKED_STATUSES:
            raise MetricError(f"Status '{labels[2]}' is not tracked")
        return family

    def set(self, series: str, labels: tuple[str, ...], value: float) -> None:
        """Set a gauge series to value.

        Raises:
            MetricError: For unknown series, bad labels, or the counter family.
        """
        family = self._check(series, labels)
        if not isinstance(family, Gauge):
            raise MetricError(f"Series '{series}' is a counter and can only be incremented")
        family.labels(*labels).set(value)

    def increment(self, series: str, labels: tuple[str, ...], amount: float = 1.0) -> None:
        """Increment a counter series.

        Raises:
            MetricError: For unknown series, bad labels, gauges, or negative amounts.
        """
        family = self._check(series, labels)
        if not isinstance(family, Counter):
            raise MetricError(f"Series '{series}' is a gauge, use set()")
        if amount < 0:
            raise MetricError("Counters can only increase")
        family.labels(*labels).inc(amount)

    def get(self, series: str, labels: tuple[str, ...]) -> float | None:
        """Read the current value of a series without creating it.

        Returns:
            The value, or None if the series was never written.
        """
        self._check(series, labels)
        return self.registry.get_sample_value(
            series, dict(zip(self._label_names[series], labels, strict=True))
        )

    def render(self) -> bytes:
        """Render every series in the Prometheus text exposition format."""
        return generate_latest(self.registry)
