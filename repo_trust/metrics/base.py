"""
Shared metric types.
"""

from typing import Callable, NamedTuple

from repo_trust.resolvers.base import RepositoryIdentity
from repo_trust.vcs.github import GitHubGateway


class MetricSpec(NamedTuple):
    """Specification for a metric check."""

    name: str
    key: str  # SubScores field the result is stored in
    label: str  # key used in the rendered report line
    weight: float
    checker: Callable[[GitHubGateway, RepositoryIdentity], float]
    error_log: str | None = None


def clamp_score(value: float) -> float:
    """Force a score into [0, 1]; NaN becomes 0."""
    if value != value:
        return 0.0
    return min(1.0, max(0.0, float(value)))
