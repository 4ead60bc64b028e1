"""Bus factor metric."""

from repo_trust.metrics.base import MetricSpec
from repo_trust.resolvers.base import RepositoryIdentity
from repo_trust.vcs.github import GitHubGateway


def calc_bus_factor(mentionable_users: int) -> float:
    """
    Score maintainer redundancy from the number of mentionable users.

    `2n / (n + 1) - 1` is 0 for a single user and approaches 1 as the
    headcount grows. Repositories with no users score 0.
    """
    if mentionable_users <= 0:
        return 0.0
    n = mentionable_users
    return max(0.0, (2 * n) / (n + 1) - 1)


def check_bus_factor(gateway: GitHubGateway, identity: RepositoryIdentity) -> float:
    users = gateway.mentionable_user_count(identity.owner, identity.name)
    return calc_bus_factor(users)


METRIC = MetricSpec(
    name="Bus Factor",
    key="bus_factor",
    label="BUS_FACTOR_SCORE",
    weight=0.10,
    checker=check_bus_factor,
    error_log="Bus factor check failed for {repo}: {error}",
)
