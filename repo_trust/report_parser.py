"""
Parsers for test-run artifacts summarised by the `report` command.
"""

import json
from pathlib import Path
from typing import NamedTuple


class ResultSummary(NamedTuple):
    """Totals extracted from a test result file."""

    total: int
    passed: int


def parse_test_results(path: str | Path) -> ResultSummary:
    """
    Count test cases in a TAP-style result file.

    Every line is one test case; lines whose first word is `ok` passed.

    Raises:
        FileNotFoundError: If the file doesn't exist.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Test result file not found: {path}")

    total = 0
    passed = 0
    for line in path.read_text(encoding="utf-8").splitlines():
        total += 1
        if line.split(" ")[0] == "ok":
            passed += 1
    return ResultSummary(total=total, passed=passed)


def parse_line_coverage(path: str | Path) -> float:
    """
    Read the line coverage percentage from a JSON coverage export.

    Expects the `data[0].totals.lines.percent` layout produced by
    llvm-cov style exporters.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If the file is not JSON or lacks the percentage.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Coverage file not found: {path}")

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        percent = data["data"][0]["totals"]["lines"]["percent"]
    except (json.JSONDecodeError, KeyError, IndexError, TypeError) as e:
        raise ValueError(f"Failed to parse coverage report {path}: {e}") from e

    if isinstance(percent, bool) or not isinstance(percent, (int, float)):
        raise ValueError(f"Line coverage in {path} is not a number: {percent!r}")
    return float(percent)


def format_summary(summary: ResultSummary, coverage: float) -> str:
    return (
        f"{summary.passed}/{summary.total} test cases passed. "
        f"{coverage:.2f}% line coverage achieved."
    )
