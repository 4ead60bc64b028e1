"""
GitHub repository URL resolver.
"""

import httpx

from repo_trust.resolvers.base import RepositoryIdentity

GITHUB_HOST = "github.com"


def parse_github_url(url: str | httpx.URL) -> RepositoryIdentity | None:
    """
    Extract owner and repository name from a GitHub URL.

    Only the first two path segments are used, so links such as
    https://github.com/owner/repo/tree/main/docs resolve to owner/repo.

    Args:
        url: A URL string or parsed URL.

    Returns:
        RepositoryIdentity, or None if the URL is not a GitHub repository URL.
    """
    if not isinstance(url, httpx.URL):
        try:
            url = httpx.URL(url)
        except (httpx.InvalidURL, TypeError):
            return None

    if (url.host or "").lower() != GITHUB_HOST:
        return None

    segments = [segment for segment in url.path.split("/") if segment]
    if len(segments) < 2:
        return None

    owner = segments[0]
    name = segments[1].removesuffix(".git")
    if not owner or not name:
        return None

    return RepositoryIdentity(
        owner=owner,
        name=name,
        canonical_url=f"https://{GITHUB_HOST}/{owner}/{name}",
    )
