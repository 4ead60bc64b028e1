"""
GitHub data gateway for repo-trust.

Wraps authenticated calls to the GitHub REST and GraphQL APIs and provides
the page-count primitive several metrics are built on.
"""

import copy
import logging
import os
import time
from datetime import date, timedelta
from typing import Any

import httpx
from dotenv import load_dotenv

from repo_trust.config import get_github_api_url, get_github_graphql_url
from repo_trust.http_client import _get_http_client

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

GITHUB_API_VERSION = "2022-11-28"

# Upper bound for a single request, in seconds
REQUEST_TIMEOUT = 30.0

MENTIONABLE_USERS_QUERY = """
query MentionableUsers($owner: String!, $name: String!) {
  repository(owner: $owner, name: $name) {
    mentionableUsers {
      totalCount
    }
  }
}
"""

RECENT_PULLS_QUERY = """
query RecentPulls($search: String!) {
  search(query: $search, type: ISSUE) {
    issueCount
  }
}
"""


def page_count_from_response(response: httpx.Response) -> int:
    """
    Count the pages of a listing fetched with one item per page.

    If the response carries a Link header with a `rel="last"` relation, the
    page count is the `page` query parameter of that URL. Otherwise the
    listing fits on one page, so the count is 1 for a non-empty body and 0
    for an empty one.

    Raises:
        ValueError: If the last-page link has no numeric page parameter or the
            body is not JSON.
    """
    last = response.links.get("last")
    if last is not None:
        page = httpx.URL(last["url"]).params.get("page")
        if page is None:
            raise ValueError(f"No page parameter in last link: {last['url']}")
        return int(page)

    body = response.json()
    return 1 if body else 0


class GitHubGateway:
    """Authenticated access to the GitHub REST and GraphQL APIs."""

    def __init__(
        self,
        token: str | None = None,
        api_url: str | None = None,
        graphql_url: str | None = None,
    ):
        """
        Initialize the gateway.

        Args:
            token: GitHub Personal Access Token. If not provided, reads from
                   GITHUB_TOKEN environment variable.
            api_url: REST API base URL (default from configuration).
            graphql_url: GraphQL endpoint (default from configuration).

        Raises:
            ValueError: If token is not provided and GITHUB_TOKEN env var is not set
        """
        self.token = token or os.getenv("GITHUB_TOKEN")
        if not self.token:
            raise ValueError(
                "GITHUB_TOKEN is required to score repositories.\n"
                "\n"
                "To get started:\n"
                "1. Create a GitHub Personal Access Token (classic):\n"
                "   → https://github.com/settings/tokens/new\n"
                "2. Select scope: 'public_repo'\n"
                "3. Set the token:\n"
                "   export GITHUB_TOKEN='your_token_here'  # Linux/macOS\n"
                "   or add to your .env file: GITHUB_TOKEN=your_token_here\n"
            )
        self.api_url = (api_url or get_github_api_url()).rstrip("/")
        self.graphql_url = graphql_url or get_github_graphql_url()
        # time.monotonic() value after which no request may start
        self.deadline: float | None = None

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": GITHUB_API_VERSION,
        }

    def bounded(self, deadline: float) -> "GitHubGateway":
        """
        Copy of this gateway whose requests must finish by `deadline`.

        Args:
            deadline: A `time.monotonic()` value.
        """
        gateway = copy.copy(self)
        gateway.deadline = deadline
        return gateway

    def remaining_time(self) -> float | None:
        """Seconds left before the deadline, or None if there is no deadline."""
        if self.deadline is None:
            return None
        return self.deadline - time.monotonic()

    def _request_timeout(self) -> httpx.Timeout:
        remaining = self.remaining_time()
        if remaining is None:
            return httpx.Timeout(REQUEST_TIMEOUT)
        if remaining <= 0:
            raise httpx.TimeoutException("Scoring deadline passed before the request")
        return httpx.Timeout(min(REQUEST_TIMEOUT, remaining))

    def rest_get(
        self,
        owner: str,
        name: str,
        path: str,
        params: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """
        GET `{api}/repos/{owner}/{name}/{path}`.

        Raises:
            httpx.HTTPStatusError: If the API answers with a non-2xx status.
            httpx.RequestError: On transport failures.
        """
        url = f"{self.api_url}/repos/{owner}/{name}/{path.lstrip('/')}"
        timeout = self._request_timeout()
        client = _get_http_client()
        response = client.get(
            url, params=params, headers=self._headers(), timeout=timeout
        )
        response.raise_for_status()
        return response

    def graph_query(
        self, query: str, variables: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        """
        Execute a GraphQL query against the GitHub API.

        Args:
            query: GraphQL query string
            variables: Query variables

        Returns:
            The `data` member of the response.

        Raises:
            httpx.HTTPStatusError: If the API returns an error status or the
                body reports GraphQL errors.
        """
        timeout = self._request_timeout()
        client = _get_http_client()
        response = client.post(
            self.graphql_url,
            json={"query": query, "variables": variables or {}},
            headers=self._headers(),
            timeout=timeout,
        )
        response.raise_for_status()
        data = response.json()

        if "errors" in data:
            raise httpx.HTTPStatusError(
                f"GitHub API Errors: {data['errors']}",
                request=response.request,
                response=response,
            )

        return data.get("data") or {}

    def page_count(
        self,
        owner: str,
        name: str,
        path: str,
        params: dict[str, Any] | None = None,
    ) -> int:
        """Number of pages `path` spans at one item per page."""
        query = dict(params or {})
        query["per_page"] = 1
        response = self.rest_get(owner, name, path, params=query)
        count = page_count_from_response(response)
        logger.debug("%s/%s %s %s -> %d page(s)", owner, name, path, params, count)
        return count

    def mentionable_user_count(self, owner: str, name: str) -> int:
        """Number of users that can be mentioned in the repository."""
        data = self.graph_query(
            MENTIONABLE_USERS_QUERY, {"owner": owner, "name": name}
        )
        repository = data.get("repository")
        if repository is None:
            raise ValueError(f"Repository {owner}/{name} not found or is inaccessible.")
        return int(repository["mentionableUsers"]["totalCount"])

    def recent_pull_count(
        self, owner: str, name: str, days: int = 365, today: date | None = None
    ) -> int:
        """Number of pull requests updated in the last `days` days."""
        since = (today or date.today()) - timedelta(days=days)
        search = f"repo:{owner}/{name} is:pr updated:>={since.isoformat()}"
        data = self.graph_query(RECENT_PULLS_QUERY, {"search": search})
        return int(data["search"]["issueCount"])

    def license_spdx_id(self, owner: str, name: str) -> str | None:
        """
        SPDX identifier of the repository's detected license.

        Returns:
            The identifier, or None if the repository declares no license.
        """
        try:
            response = self.rest_get(owner, name, "license")
        except httpx.HTTPStatusError as e:
            if e.response is not None and e.response.status_code == 404:
                return None
            raise
        license_info = response.json().get("license") or {}
        return license_info.get("spdx_id")
