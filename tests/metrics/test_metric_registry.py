"""
Tests for the metric registry.
"""

import math

import pytest

from repo_trust.core import SubScores
from repo_trust.metrics import METRICS, get_metric_weights
from repo_trust.metrics.base import clamp_score


def test_registry_order_matches_sub_scores():
    assert [spec.key for spec in METRICS] == list(SubScores._fields)


def test_report_labels():
    assert [spec.label for spec in METRICS] == [
        "RAMP_UP_SCORE",
        "CORRECTNESS_SCORE",
        "BUS_FACTOR_SCORE",
        "RESPONSIVE_MAINTAINER_SCORE",
        "LICENSE_SCORE",
    ]


def test_weights_sum_to_one():
    assert sum(get_metric_weights().values()) == pytest.approx(1.0)


def test_license_dominates():
    weights = get_metric_weights()
    assert max(weights, key=weights.get) == "license"


def test_clamp_score():
    assert clamp_score(0.5) == 0.5
    assert clamp_score(-1.0) == 0.0
    assert clamp_score(1.5) == 1.0
    assert clamp_score(math.nan) == 0.0
    assert clamp_score(math.inf) == 1.0
