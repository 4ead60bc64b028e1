"""
Source URL resolution: GitHub repository pages and npm package pages.
"""

import logging

from repo_trust.resolvers.base import (
    InvalidSourceError,
    RepositoryIdentity,
    ResolvedSource,
    SourceKind,
    parse_source_url,
)
from repo_trust.resolvers.github import GITHUB_HOST, parse_github_url
from repo_trust.resolvers.npm import NPM_HOST, NpmResolver

__all__ = [
    "InvalidSourceError",
    "NpmResolver",
    "RepositoryIdentity",
    "ResolvedSource",
    "SourceKind",
    "parse_github_url",
    "parse_source_url",
    "resolve_source",
]

logger = logging.getLogger(__name__)


def resolve_source(
    line: str, npm_resolver: NpmResolver | None = None
) -> ResolvedSource | None:
    """
    Resolve one input line to a GitHub repository.

    Args:
        line: Stripped, non-empty input line.
        npm_resolver: Resolver used for npm URLs (created on demand).

    Returns:
        ResolvedSource, or None when the host is unsupported or the package
        cannot be mapped to a GitHub repository.

    Raises:
        InvalidSourceError: If the line is not a URL.
    """
    url = parse_source_url(line)
    host = (url.host or "").lower()

    if host == GITHUB_HOST:
        identity = parse_github_url(url)
        kind = SourceKind.GITHUB
    elif host == NPM_HOST:
        identity = (npm_resolver or NpmResolver()).resolve(url)
        kind = SourceKind.NPM
    else:
        logger.info("Skipping %s: unsupported host %r", line, host)
        return None

    if identity is None:
        logger.info("Skipping %s: no repository found", line)
        return None
    return ResolvedSource(url=line, kind=kind, identity=identity)
