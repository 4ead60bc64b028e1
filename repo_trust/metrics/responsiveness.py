"""Responsive maintainer metric."""

from statistics import NormalDist

from repo_trust.metrics.base import MetricSpec
from repo_trust.resolvers.base import RepositoryIdentity
from repo_trust.vcs.github import GitHubGateway

LOOKBACK_DAYS = 365

_STANDARD_NORMAL = NormalDist(0.0, 1.0)


def calc_responsiveness(recent_pulls: int) -> float:
    """
    Score maintainer activity from pull requests updated in the last year.

    Standard normal CDF at `recent_pulls / 13 - 2`: about 26 updated pull
    requests score 0.5, a handful scores close to 0 and a busy project
    approaches 1.
    """
    return _STANDARD_NORMAL.cdf(recent_pulls / 13 - 2)


def check_responsiveness(
    gateway: GitHubGateway, identity: RepositoryIdentity
) -> float:
    pulls = gateway.recent_pull_count(
        identity.owner, identity.name, days=LOOKBACK_DAYS
    )
    return calc_responsiveness(pulls)


METRIC = MetricSpec(
    name="Responsive Maintainer",
    key="responsiveness",
    label="RESPONSIVE_MAINTAINER_SCORE",
    weight=0.25,
    checker=check_responsiveness,
    error_log="Responsiveness check failed for {repo}: {error}",
)
