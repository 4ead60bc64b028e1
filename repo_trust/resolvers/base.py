"""
Shared types for source URL resolution.
"""

from enum import Enum
from typing import NamedTuple

import httpx


class InvalidSourceError(ValueError):
    """Raised when an input line is not a URL at all."""


class SourceKind(str, Enum):
    """Where a source URL points to."""

    GITHUB = "github"
    NPM = "npm"


class RepositoryIdentity(NamedTuple):
    """Canonical identity of a GitHub repository."""

    owner: str
    name: str
    canonical_url: str


class ResolvedSource(NamedTuple):
    """An input line together with the repository it resolved to."""

    url: str
    kind: SourceKind
    identity: RepositoryIdentity


def parse_source_url(line: str) -> httpx.URL:
    """
    Parse an input line as an absolute URL.

    Args:
        line: A single stripped line from the input file.

    Returns:
        The parsed URL.

    Raises:
        InvalidSourceError: If the line cannot be parsed or has no scheme.
    """
    try:
        url = httpx.URL(line)
    except (httpx.InvalidURL, TypeError) as e:
        raise InvalidSourceError(f"{line} is not a url") from e

    if not url.scheme:
        raise InvalidSourceError(f"{line} is not a url")
    return url
