"""Process-wide pooled HTTP client shared by the resolvers and the gateway."""

import threading

import httpx

from repo_trust import __version__
from repo_trust.config import get_verify_ssl

REQUEST_TIMEOUT = httpx.Timeout(30.0, connect=10.0)

_client_lock = threading.Lock()
_http_client: httpx.Client | None = None
_http_client_verify_ssl: bool | None = None


def _build_client(verify_ssl: bool) -> httpx.Client:
    return httpx.Client(
        verify=verify_ssl,
        timeout=REQUEST_TIMEOUT,
        follow_redirects=True,
        headers={"User-Agent": f"repo-trust/{__version__}"},
        limits=httpx.Limits(max_connections=10, max_keepalive_connections=5),
    )


def _get_http_client() -> httpx.Client:
    """Return the shared client, building it on first use.

    Metric checks call this from worker threads, so creation is serialised.
    A change of the SSL verification flag replaces the client.
    """
    global _http_client, _http_client_verify_ssl
    verify_ssl = get_verify_ssl()

    with _client_lock:
        stale = (
            _http_client is None
            or _http_client.is_closed
            or _http_client_verify_ssl != verify_ssl
        )
        if stale:
            if _http_client is not None:
                _http_client.close()
            _http_client = _build_client(verify_ssl)
            _http_client_verify_ssl = verify_ssl
        return _http_client


def close_http_client() -> None:
    """Close the shared client; the next request builds a fresh one."""
    global _http_client, _http_client_verify_ssl
    with _client_lock:
        if _http_client is not None:
            _http_client.close()
        _http_client = None
        _http_client_verify_ssl = None
