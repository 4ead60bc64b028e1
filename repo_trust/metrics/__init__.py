"""
Metric registry.

The order of METRICS is the order of the sub-scores in SubScores and in the
rendered report line.
"""

from repo_trust.metrics import (
    bus_factor,
    correctness,
    license_compatibility,
    ramp_up,
    responsiveness,
)
from repo_trust.metrics.base import MetricSpec, clamp_score

METRICS: list[MetricSpec] = [
    ramp_up.METRIC,
    correctness.METRIC,
    bus_factor.METRIC,
    responsiveness.METRIC,
    license_compatibility.METRIC,
]

__all__ = ["METRICS", "MetricSpec", "clamp_score", "get_metric_weights"]


def get_metric_weights() -> dict[str, float]:
    """Net score weight per SubScores field."""
    return {spec.key: spec.weight for spec in METRICS}
