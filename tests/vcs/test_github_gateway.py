"""Tests for the GitHub data gateway."""

import time
from datetime import date
from unittest.mock import patch

import httpx
import pytest

from repo_trust.vcs.github import (
    REQUEST_TIMEOUT,
    GitHubGateway,
    page_count_from_response,
)

API = "https://api.example.test"
GRAPHQL = "https://api.example.test/graphql"
ISSUES = f"{API}/repositories/1/issues?state=all&per_page=1"


def _response(status_code: int = 200, method: str = "GET", **kwargs) -> httpx.Response:
    return httpx.Response(
        status_code, request=httpx.Request(method, f"{API}/repos/o/r"), **kwargs
    )


def _gateway() -> GitHubGateway:
    return GitHubGateway(token="test_token", api_url=API, graphql_url=GRAPHQL)


class TestPageCountFromResponse:
    """Test pagination counting."""

    def test_single_element_without_link_header(self):
        assert page_count_from_response(_response(json=[{"id": 1}])) == 1

    def test_empty_body_without_link_header(self):
        assert page_count_from_response(_response(json=[])) == 0

    def test_last_relation(self):
        link = f'<{ISSUES}&page=2>; rel="next", <{ISSUES}&page=7>; rel="last"'
        response = _response(headers={"Link": link}, json=[{"id": 1}])
        assert page_count_from_response(response) == 7

    def test_last_relation_first(self):
        link = f'<{ISSUES}&page=7>; rel="last", <{ISSUES}&page=2>; rel="next"'
        response = _response(headers={"Link": link}, json=[{"id": 1}])
        assert page_count_from_response(response) == 7

    def test_arbitrary_spacing(self):
        link = (
            f'<{ISSUES}&page=2>;rel="next",   <{ISSUES}&page=1>;  rel="first",'
            f'<{ISSUES}&page=7>;   rel="last"'
        )
        response = _response(headers={"Link": link}, json=[{"id": 1}])
        assert page_count_from_response(response) == 7

    def test_multi_digit_page(self):
        link = (
            f'<{ISSUES}&page=2>; rel="next", '
            f'<{API}/repositories/1/issues?page=15234&per_page=1>; rel="last"'
        )
        response = _response(headers={"Link": link}, json=[{"id": 1}])
        assert page_count_from_response(response) == 15234

    def test_link_header_without_last_relation(self):
        link = f'<{ISSUES}&page=1>; rel="prev", <{ISSUES}&page=1>; rel="first"'
        response = _response(headers={"Link": link}, json=[{"id": 1}])
        assert page_count_from_response(response) == 1

    def test_last_relation_without_page(self):
        response = _response(headers={"Link": f'<{ISSUES}>; rel="last"'}, json=[])
        with pytest.raises(ValueError):
            page_count_from_response(response)


class TestGatewayConstruction:
    """Test token handling."""

    def test_requires_token(self):
        with patch.dict("os.environ", {}, clear=True):
            with pytest.raises(ValueError, match="GITHUB_TOKEN is required"):
                GitHubGateway()

    def test_empty_token(self):
        with patch.dict("os.environ", {}, clear=True):
            with pytest.raises(ValueError, match="GITHUB_TOKEN is required"):
                GitHubGateway(token="")

    def test_reads_token_from_env(self):
        with patch.dict("os.environ", {"GITHUB_TOKEN": "env_token"}):
            assert GitHubGateway().token == "env_token"

    def test_token_parameter(self):
        gateway = _gateway()
        assert gateway.token == "test_token"
        assert gateway.api_url == API
        assert gateway.graphql_url == GRAPHQL


@patch("repo_trust.vcs.github._get_http_client")
class TestGatewayRequests:
    """Test REST and GraphQL calls."""

    def test_rest_get(self, mock_get_client):
        mock_get_client.return_value.get.return_value = _response(json={"ok": True})

        response = _gateway().rest_get("owner", "repo", "issues", {"state": "all"})

        assert response.json() == {"ok": True}
        call = mock_get_client.return_value.get.call_args
        assert call.args[0] == f"{API}/repos/owner/repo/issues"
        assert call.kwargs["params"] == {"state": "all"}
        assert call.kwargs["headers"]["Authorization"] == "Bearer test_token"

    def test_rest_get_error_status(self, mock_get_client):
        mock_get_client.return_value.get.return_value = _response(500, json={})
        with pytest.raises(httpx.HTTPStatusError):
            _gateway().rest_get("owner", "repo", "issues")

    def test_page_count_requests_one_item_per_page(self, mock_get_client):
        link = f'<{ISSUES}&page=2>; rel="next", <{ISSUES}&page=42>; rel="last"'
        mock_get_client.return_value.get.return_value = _response(
            headers={"Link": link}, json=[{"id": 1}]
        )

        count = _gateway().page_count("owner", "repo", "issues", {"state": "closed"})

        assert count == 42
        params = mock_get_client.return_value.get.call_args.kwargs["params"]
        assert params == {"state": "closed", "per_page": 1}

    def test_graph_query(self, mock_get_client):
        mock_get_client.return_value.post.return_value = _response(
            method="POST", json={"data": {"viewer": {"login": "me"}}}
        )

        data = _gateway().graph_query("query { viewer { login } }")

        assert data == {"viewer": {"login": "me"}}
        call = mock_get_client.return_value.post.call_args
        assert call.args[0] == GRAPHQL
        assert call.kwargs["json"]["variables"] == {}

    def test_graph_query_errors(self, mock_get_client):
        mock_get_client.return_value.post.return_value = _response(
            method="POST", json={"errors": [{"message": "Bad query"}]}
        )
        with pytest.raises(httpx.HTTPStatusError, match="GitHub API Errors"):
            _gateway().graph_query("query { nope }")

    def test_mentionable_user_count(self, mock_get_client):
        mock_get_client.return_value.post.return_value = _response(
            method="POST",
            json={"data": {"repository": {"mentionableUsers": {"totalCount": 12}}}},
        )
        assert _gateway().mentionable_user_count("owner", "repo") == 12
        variables = mock_get_client.return_value.post.call_args.kwargs["json"][
            "variables"
        ]
        assert variables == {"owner": "owner", "name": "repo"}

    def test_mentionable_user_count_missing_repository(self, mock_get_client):
        mock_get_client.return_value.post.return_value = _response(
            method="POST", json={"data": {"repository": None}}
        )
        with pytest.raises(ValueError, match="not found"):
            _gateway().mentionable_user_count("owner", "repo")

    def test_recent_pull_count(self, mock_get_client):
        mock_get_client.return_value.post.return_value = _response(
            method="POST", json={"data": {"search": {"issueCount": 31}}}
        )

        count = _gateway().recent_pull_count(
            "owner", "repo", days=365, today=date(2024, 6, 30)
        )

        assert count == 31
        variables = mock_get_client.return_value.post.call_args.kwargs["json"][
            "variables"
        ]
        assert variables == {"search": "repo:owner/repo is:pr updated:>=2023-07-01"}

    def test_license_spdx_id(self, mock_get_client):
        mock_get_client.return_value.get.return_value = _response(
            json={"license": {"key": "mit", "spdx_id": "MIT"}}
        )
        assert _gateway().license_spdx_id("owner", "repo") == "MIT"

    def test_license_not_found(self, mock_get_client):
        mock_get_client.return_value.get.return_value = _response(
            404, json={"message": "Not Found"}
        )
        assert _gateway().license_spdx_id("owner", "repo") is None

    def test_license_server_error(self, mock_get_client):
        mock_get_client.return_value.get.return_value = _response(502, json={})
        with pytest.raises(httpx.HTTPStatusError):
            _gateway().license_spdx_id("owner", "repo")


@patch("repo_trust.vcs.github._get_http_client")
class TestGatewayDeadline:
    """Test requests made under a scoring deadline."""

    def test_unbounded_gateway_uses_request_timeout(self, mock_get_client):
        mock_get_client.return_value.get.return_value = _response(json=[])

        gateway = _gateway()
        gateway.rest_get("owner", "repo", "issues")

        assert gateway.remaining_time() is None
        timeout = mock_get_client.return_value.get.call_args.kwargs["timeout"]
        assert timeout.read == REQUEST_TIMEOUT

    def test_bounded_copy_leaves_original_untouched(self, mock_get_client):
        gateway = _gateway()
        bounded = gateway.bounded(time.monotonic() + 60)

        assert bounded is not gateway
        assert gateway.deadline is None
        assert bounded.token == gateway.token
        assert 0 < bounded.remaining_time() <= 60

    def test_request_limited_to_remaining_time(self, mock_get_client):
        mock_get_client.return_value.post.return_value = _response(
            method="POST", json={"data": {}}
        )

        bounded = _gateway().bounded(time.monotonic() + 5)
        bounded.graph_query("query { viewer { login } }")

        timeout = mock_get_client.return_value.post.call_args.kwargs["timeout"]
        assert 0 < timeout.read <= 5
        assert 0 < timeout.connect <= 5

    def test_no_request_after_deadline(self, mock_get_client):
        expired = _gateway().bounded(time.monotonic() - 1)

        with pytest.raises(httpx.TimeoutException):
            expired.rest_get("owner", "repo", "issues")
        with pytest.raises(httpx.TimeoutException):
            expired.graph_query("query { viewer { login } }")

        mock_get_client.assert_not_called()
