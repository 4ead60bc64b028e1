"""
npm package resolver.

Maps an npm package page (https://www.npmjs.com/package/<name>) to the GitHub
repository declared in the package's registry metadata.
"""

import logging
from typing import Any

import httpx

from repo_trust.config import get_npm_registry_url
from repo_trust.http_client import _get_http_client
from repo_trust.resolvers.base import RepositoryIdentity
from repo_trust.resolvers.github import parse_github_url

logger = logging.getLogger(__name__)

NPM_HOST = "www.npmjs.com"


def package_name_from_url(url: httpx.URL) -> str | None:
    """
    Extract the package name from an npm package page URL.

    Supports plain (`/package/left-pad`) and scoped (`/package/@babel/core`)
    packages.
    """
    segments = [segment for segment in url.path.split("/") if segment]
    if len(segments) < 2 or segments[0] != "package":
        return None
    if segments[1].startswith("@"):
        if len(segments) < 3:
            return None
        return f"{segments[1]}/{segments[2]}"
    return segments[1]


def clean_repository_url(raw_url: str) -> str:
    """Strip the `git+` VCS prefix and the `.git` suffix from a repository URL."""
    url = raw_url.strip().removeprefix("git+")
    return url.removesuffix("/").removesuffix(".git")


def extract_repository_url(metadata: dict[str, Any]) -> str | None:
    """
    Read the repository URL from npm registry metadata.

    Handles both forms of the `repository` field:
    - {"type": "git", "url": "git+https://github.com/owner/repo.git"}
    - "https://github.com/owner/repo"
    """
    repository = metadata.get("repository")
    if isinstance(repository, dict):
        url = repository.get("url")
    elif isinstance(repository, str):
        url = repository
    else:
        return None
    return url if isinstance(url, str) and url else None


class NpmResolver:
    """Resolve npm package pages to GitHub repositories."""

    def __init__(self, registry_url: str | None = None):
        self.registry_url = (registry_url or get_npm_registry_url()).rstrip("/")

    def fetch_metadata(self, package_name: str) -> dict[str, Any] | None:
        """
        Fetch the registry metadata document for a package.

        Returns:
            Parsed metadata, or None if the request failed or the body is not
            a JSON object.
        """
        url = f"{self.registry_url}/{package_name}"
        try:
            client = _get_http_client()
            response = client.get(url, headers={"Accept": "application/json"})
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.debug("npm metadata request for %s failed: %s", package_name, e)
            return None
        return data if isinstance(data, dict) else None

    def resolve(self, url: str | httpx.URL) -> RepositoryIdentity | None:
        """
        Resolve an npm package page URL to a GitHub repository.

        Args:
            url: npm package page URL.

        Returns:
            RepositoryIdentity, or None when the package cannot be mapped to a
            GitHub repository.
        """
        if not isinstance(url, httpx.URL):
            try:
                url = httpx.URL(url)
            except (httpx.InvalidURL, TypeError):
                return None

        if (url.host or "").lower() != NPM_HOST:
            return None

        package_name = package_name_from_url(url)
        if not package_name:
            logger.debug("No package name in %s", url)
            return None

        metadata = self.fetch_metadata(package_name)
        if metadata is None:
            return None

        repository_url = extract_repository_url(metadata)
        if not repository_url:
            logger.debug("Package %s declares no repository", package_name)
            return None

        identity = parse_github_url(clean_repository_url(repository_url))
        if identity is None:
            logger.debug(
                "Repository %s of package %s is not on GitHub",
                repository_url,
                package_name,
            )
        return identity
