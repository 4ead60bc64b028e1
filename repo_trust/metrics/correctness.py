"""Correctness metric."""

from repo_trust.metrics.base import MetricSpec
from repo_trust.resolvers.base import RepositoryIdentity
from repo_trust.vcs.github import GitHubGateway


def calc_correctness(all_issues: int, closed_issues: int) -> float:
    """
    Ratio of closed issues to all issues.

    Returns 0.0 when there are no issues or the counts are inconsistent
    (more closed than total).
    """
    if all_issues == 0 or all_issues < closed_issues:
        return 0.0
    return closed_issues / all_issues


def issue_count(gateway: GitHubGateway, identity: RepositoryIdentity, state: str) -> int:
    """
    Count issues in `state`, excluding pull requests.

    The issues listing includes pull requests, so the pull count for the same
    state is subtracted.
    """
    params = {"state": state}
    issues = gateway.page_count(identity.owner, identity.name, "issues", params)
    pulls = gateway.page_count(identity.owner, identity.name, "pulls", params)
    return issues - pulls


def check_correctness(gateway: GitHubGateway, identity: RepositoryIdentity) -> float:
    all_issues = issue_count(gateway, identity, "all")
    closed_issues = issue_count(gateway, identity, "closed")
    return calc_correctness(all_issues, closed_issues)


METRIC = MetricSpec(
    name="Correctness",
    key="correctness",
    label="CORRECTNESS_SCORE",
    weight=0.10,
    checker=check_correctness,
    error_log="Correctness check failed for {repo}: {error}",
)
