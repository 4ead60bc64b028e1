"""
GitHub access layer for repo-trust.

Provides the authenticated API gateway used by the metric calculators and the
scratch clone used to inspect a repository's working tree.
"""

from repo_trust.vcs.clone import CloneError, scratch_clone
from repo_trust.vcs.github import GitHubGateway, page_count_from_response

__all__ = [
    "CloneError",
    "GitHubGateway",
    "page_count_from_response",
    "scratch_clone",
]
