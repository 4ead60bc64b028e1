"""
Configuration management for repo-trust.

Settings are resolved in this order:
1. Values set explicitly at runtime (CLI flags)
2. Environment variables
3. .repo-trust.toml (local config)
4. pyproject.toml (project-level config)
5. Built-in defaults
"""

import logging
import os
import tomllib
from pathlib import Path
from typing import Any

# project_root is the parent directory of repo_trust/
PROJECT_ROOT = Path(__file__).resolve().parent.parent

CONFIG_SECTION = "repo-trust"

# Global configuration for SSL verification
# Default: True (verify SSL certificates)
# Can be set to False by CLI --insecure flag
VERIFY_SSL = True

DEFAULT_GITHUB_API_URL = "https://api.github.com"
DEFAULT_GITHUB_GRAPHQL_URL = "https://api.github.com/graphql"
DEFAULT_NPM_REGISTRY_URL = "https://registry.npmjs.org"

# Per-URL budget for all five metrics, in seconds
DEFAULT_TIMEOUT = 120.0
DEFAULT_MAX_WORKERS = 5

_TIMEOUT: float | None = None
_MAX_WORKERS: int | None = None


def load_config_file(config_path: Path) -> dict:
    """Load a TOML configuration file."""
    if not config_path.exists():
        return {}
    try:
        with open(config_path, "rb") as f:
            return tomllib.load(f)
    except Exception as e:
        raise ValueError(f"Failed to load config from {config_path}: {e}") from e


def get_tool_config() -> dict[str, Any]:
    """
    Load the [tool.repo-trust] table.

    .repo-trust.toml takes priority; pyproject.toml is only consulted when the
    local file has no such table.
    """
    for filename in (".repo-trust.toml", "pyproject.toml"):
        config = load_config_file(PROJECT_ROOT / filename)
        section = config.get("tool", {}).get(CONFIG_SECTION, {})
        if section:
            return section
    return {}


def _lookup(env_var: str, key: str, default: Any) -> Any:
    value = os.getenv(env_var)
    if value:
        return value
    return get_tool_config().get(key, default)


def set_verify_ssl(verify: bool) -> None:
    """
    Set the SSL verification setting globally.

    Args:
        verify: Whether to verify SSL certificates.
    """
    global VERIFY_SSL
    VERIFY_SSL = verify


def get_verify_ssl() -> bool:
    """
    Get the current SSL verification setting.

    Returns:
        Whether SSL verification is enabled.
    """
    return VERIFY_SSL


def get_github_api_url() -> str:
    """Base URL of the GitHub REST API (GITHUB_API_URL or `github-api-url`)."""
    return str(
        _lookup("GITHUB_API_URL", "github-api-url", DEFAULT_GITHUB_API_URL)
    ).rstrip("/")


def get_github_graphql_url() -> str:
    """GitHub GraphQL endpoint (GITHUB_GRAPHQL_URL or `github-graphql-url`)."""
    return str(
        _lookup("GITHUB_GRAPHQL_URL", "github-graphql-url", DEFAULT_GITHUB_GRAPHQL_URL)
    )


def get_npm_registry_url() -> str:
    """npm registry base URL (NPM_REGISTRY_URL or `npm-registry-url`)."""
    return str(
        _lookup("NPM_REGISTRY_URL", "npm-registry-url", DEFAULT_NPM_REGISTRY_URL)
    ).rstrip("/")


def get_timeout() -> float:
    """
    Get the per-URL scoring timeout in seconds.

    Priority:
    1. Explicitly set value via set_timeout()
    2. REPO_TRUST_TIMEOUT environment variable
    3. `timeout` in the config files
    4. Default: 120 seconds
    """
    if _TIMEOUT is not None:
        return _TIMEOUT

    value = _lookup("REPO_TRUST_TIMEOUT", "timeout", DEFAULT_TIMEOUT)
    try:
        return float(value)
    except (TypeError, ValueError):
        return DEFAULT_TIMEOUT


def set_timeout(seconds: float) -> None:
    """Set the per-URL scoring timeout explicitly."""
    global _TIMEOUT
    _TIMEOUT = seconds


def get_max_workers() -> int:
    """Number of metrics evaluated concurrently for a single URL."""
    if _MAX_WORKERS is not None:
        return _MAX_WORKERS
    try:
        return max(1, int(get_tool_config().get("max-workers", DEFAULT_MAX_WORKERS)))
    except (TypeError, ValueError):
        return DEFAULT_MAX_WORKERS


def set_max_workers(workers: int) -> None:
    """Set the metric worker count explicitly."""
    global _MAX_WORKERS
    _MAX_WORKERS = max(1, workers)


def configure_logging() -> None:
    """
    Configure the `repo_trust` logger from LOG_LEVEL and LOG_FILE.

    LOG_LEVEL=1 logs INFO, LOG_LEVEL=2 logs DEBUG, anything else disables
    logging. Records are only ever written to LOG_FILE; if it is unset or
    cannot be opened, logging stays off.
    """
    logger = logging.getLogger("repo_trust")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = False

    level = {"1": logging.INFO, "2": logging.DEBUG}.get(
        os.getenv("LOG_LEVEL", "").strip()
    )
    log_file = os.getenv("LOG_FILE")

    handler: logging.Handler | None = None
    if level is not None and log_file:
        try:
            handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
        except OSError:
            handler = None

    if handler is None:
        logger.addHandler(logging.NullHandler())
        logger.setLevel(logging.CRITICAL + 1)
        return

    handler.setFormatter(
        logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    )
    logger.addHandler(handler)
    logger.setLevel(level)
