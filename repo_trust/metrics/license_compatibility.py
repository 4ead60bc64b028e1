"""License compatibility metric."""

from repo_trust.metrics.base import MetricSpec
from repo_trust.resolvers.base import RepositoryIdentity
from repo_trust.vcs.github import GitHubGateway

# SPDX identifiers that can be reused in an LGPL-2.1 project
COMPATIBLE_LICENSES = frozenset(
    {
        "LGPL-2.1-only",
        "LGPL-2.1",
        "LGPL-2.1-or-later",
        "LGPL-3.0-only",
        "LGPL-3.0",
        "BSD-3-Clause",
        "MIT",
        "X11",
        "CC0-1.0",
        "Unlicense",
    }
)


def calc_compatibility(spdx_id: str | None) -> float:
    """1.0 for an LGPL-2.1 compatible license, 0.0 otherwise (or no license)."""
    if spdx_id and spdx_id in COMPATIBLE_LICENSES:
        return 1.0
    return 0.0


def check_license_compatibility(
    gateway: GitHubGateway, identity: RepositoryIdentity
) -> float:
    spdx_id = gateway.license_spdx_id(identity.owner, identity.name)
    return calc_compatibility(spdx_id)


METRIC = MetricSpec(
    name="License Compatibility",
    key="license",
    label="LICENSE_SCORE",
    weight=0.50,
    checker=check_license_compatibility,
    error_log="License check failed for {repo}: {error}",
)
