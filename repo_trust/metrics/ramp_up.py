"""Ramp-up time metric."""

import math
from pathlib import Path
from statistics import NormalDist

from repo_trust.metrics.base import MetricSpec, clamp_score
from repo_trust.resolvers.base import RepositoryIdentity
from repo_trust.vcs.clone import DEFAULT_CLONE_TIMEOUT, scratch_clone
from repo_trust.vcs.github import GitHubGateway

# README length (in lines) treated as ideal
IDEAL_README_LINES = 150
# Peak of pdf(x) * sqrt(x), so the best README scores ~1.0
NORMALIZATION = 0.2613

_STANDARD_NORMAL = NormalDist(0.0, 1.0)


def calc_ramp_up_time(lines: int) -> float:
    """
    Score how quickly a newcomer can get started from the README length.

    Uses `pdf(x) * sqrt(x) / 0.2613` with `x = lines / 150 * 0.7`, so a
    missing README scores 0, roughly 150 lines scores ~1.0 and very long
    READMEs decay back towards 0.
    """
    if lines <= 0:
        return 0.0
    x = lines / IDEAL_README_LINES * 0.7
    return clamp_score(_STANDARD_NORMAL.pdf(x) * math.sqrt(x) / NORMALIZATION)


def find_readme(work_tree: Path) -> Path | None:
    """Return the top-level README file of a working tree, if any."""
    candidates = sorted(
        entry
        for entry in work_tree.iterdir()
        if entry.is_file() and entry.name.lower().startswith("readme")
    )
    return candidates[0] if candidates else None


def count_readme_lines(work_tree: Path) -> int:
    """Number of lines in the top-level README (0 if there is none)."""
    readme = find_readme(work_tree)
    if readme is None:
        return 0
    return len(readme.read_text(encoding="utf-8", errors="replace").splitlines())


def check_ramp_up_time(gateway: GitHubGateway, identity: RepositoryIdentity) -> float:
    # The clone may only use what is left of the scoring budget
    remaining = gateway.remaining_time()
    timeout = DEFAULT_CLONE_TIMEOUT if remaining is None else remaining
    with scratch_clone(f"{identity.canonical_url}.git", timeout=timeout) as work_tree:
        lines = count_readme_lines(work_tree)
    return calc_ramp_up_time(lines)


METRIC = MetricSpec(
    name="Ramp-up Time",
    key="ramp_up",
    label="RAMP_UP_SCORE",
    weight=0.05,
    checker=check_ramp_up_time,
    error_log="Ramp-up time check failed for {repo}: {error}",
)
