"""
Core scoring logic for repo-trust.

Resolves input URLs, runs the metric checks for each repository, combines the
sub-scores into a net score and renders the ranked report.
"""

import json
import logging
import time
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor, wait
from pathlib import Path
from typing import NamedTuple

from repo_trust.config import get_max_workers, get_timeout
from repo_trust.metrics import METRICS, MetricSpec, clamp_score, get_metric_weights
from repo_trust.resolvers import (
    NpmResolver,
    RepositoryIdentity,
    ResolvedSource,
    parse_source_url,
    resolve_source,
)
from repo_trust.vcs.github import GitHubGateway

logger = logging.getLogger(__name__)

# --- Data Structures ---


class SubScores(NamedTuple):
    """The five metric scores of a repository, each in [0, 1]."""

    ramp_up: float = 0.0
    correctness: float = 0.0
    bus_factor: float = 0.0
    responsiveness: float = 0.0
    license: float = 0.0


class ScoreRecord(NamedTuple):
    """The scored result for one input URL."""

    url: str
    net_score: float
    scores: SubScores


# --- Scoring ---


def compute_net_score(scores: SubScores) -> float:
    """Weighted sum of the sub-scores (weights sum to 1.0)."""
    weights = get_metric_weights()
    total = sum(weight * getattr(scores, key) for key, weight in weights.items())
    return clamp_score(total)


def _run_metric(
    spec: MetricSpec, gateway: GitHubGateway, identity: RepositoryIdentity
) -> float:
    """Run one metric check; any failure scores 0.0."""
    try:
        return clamp_score(spec.checker(gateway, identity))
    except Exception as e:
        if logger.isEnabledFor(logging.DEBUG):
            message = spec.error_log or "{name} check failed for {repo}: {error}"
            logger.debug(
                "%s",
                message.format(
                    name=spec.name, repo=f"{identity.owner}/{identity.name}", error=e
                ),
            )
        return 0.0


def score_repository(
    gateway: GitHubGateway,
    identity: RepositoryIdentity,
    timeout: float | None = None,
    max_workers: int | None = None,
) -> SubScores:
    """
    Compute all sub-scores for a repository.

    The metric checks run concurrently. Checks that fail or are still running
    when `timeout` expires score 0.0 without affecting the others.

    Args:
        gateway: Authenticated GitHub gateway.
        identity: Repository to score.
        timeout: Seconds allowed for all checks together (default from config).
        max_workers: Concurrent checks (default from config).

    Returns:
        SubScores with every value in [0, 1].
    """
    timeout = get_timeout() if timeout is None else timeout
    max_workers = get_max_workers() if max_workers is None else max_workers

    # Requests and clones made by the checks fail once the deadline passes
    bounded_gateway = gateway.bounded(time.monotonic() + timeout)

    executor = ThreadPoolExecutor(
        max_workers=max_workers, thread_name_prefix="repo-trust-metric"
    )
    try:
        futures = {
            spec.key: executor.submit(_run_metric, spec, bounded_gateway, identity)
            for spec in METRICS
        }
        wait(futures.values(), timeout=timeout)
    finally:
        executor.shutdown(wait=False, cancel_futures=True)

    values: dict[str, float] = {}
    for key, future in futures.items():
        if future.done() and not future.cancelled():
            values[key] = future.result()
        else:
            logger.debug(
                "%s check for %s/%s timed out", key, identity.owner, identity.name
            )
            values[key] = 0.0
    return SubScores(**values)


def score_source(
    gateway: GitHubGateway,
    source: ResolvedSource,
    timeout: float | None = None,
    max_workers: int | None = None,
) -> ScoreRecord:
    """Score a resolved input URL."""
    scores = score_repository(gateway, source.identity, timeout, max_workers)
    record = ScoreRecord(
        url=source.url, net_score=compute_net_score(scores), scores=scores
    )
    logger.info("Scored %s: %.2f", source.url, record.net_score)
    return record


def rank_records(records: Iterable[ScoreRecord]) -> list[ScoreRecord]:
    """Sort by net score, highest first; equal scores keep their input order."""
    return sorted(records, key=lambda record: record.net_score, reverse=True)


def format_record(record: ScoreRecord) -> str:
    """
    Render a record as one report line.

    The URL is written verbatim (JSON-quoted), every score with two decimals.
    """
    url = json.dumps(record.url, ensure_ascii=False)
    fields = [f'"URL":{url}', f'"NET_SCORE":{record.net_score:.2f}']
    for spec in METRICS:
        fields.append(f'"{spec.label}":{getattr(record.scores, spec.key):.2f}')
    return "{" + ", ".join(fields) + "}"


# --- Input ---


def read_source_urls(path: str | Path) -> list[str]:
    """
    Read the URL list from a file.

    Blank lines are ignored. Every other line must be a URL.

    Raises:
        OSError: If the file cannot be read.
        InvalidSourceError: If a line is not a URL.
    """
    with open(path, "r", encoding="utf-8") as f:
        lines = [line.strip() for line in f]

    urls = [line for line in lines if line]
    for url in urls:
        parse_source_url(url)
    return urls


def analyze_sources(
    urls: Iterable[str],
    gateway_factory: Callable[[], GitHubGateway] = GitHubGateway,
    npm_resolver: NpmResolver | None = None,
    timeout: float | None = None,
    max_workers: int | None = None,
) -> list[ScoreRecord]:
    """
    Resolve and score every URL, one at a time.

    Unsupported or unresolvable URLs are skipped. The gateway is only
    created once a URL resolves, so a missing token is reported only when
    scoring is actually needed.

    Returns:
        Records ranked by net score.

    Raises:
        InvalidSourceError: If a URL is malformed.
        ValueError: If the gateway cannot be created (missing token).
    """
    npm_resolver = npm_resolver or NpmResolver()
    gateway: GitHubGateway | None = None
    records = []

    for url in urls:
        source = resolve_source(url, npm_resolver)
        if source is None:
            continue
        if gateway is None:
            gateway = gateway_factory()
        records.append(score_source(gateway, source, timeout, max_workers))

    return rank_records(records)
