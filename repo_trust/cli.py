"""
Command-line interface for repo-trust.
"""

from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from repo_trust.config import (
    configure_logging,
    set_max_workers,
    set_timeout,
    set_verify_ssl,
)
from repo_trust.core import analyze_sources, format_record, read_source_urls
from repo_trust.http_client import close_http_client
from repo_trust.report_parser import (
    format_summary,
    parse_line_coverage,
    parse_test_results,
)
from repo_trust.resolvers import InvalidSourceError

# --- Typer App ---
app = typer.Typer()
console = Console()
err_console = Console(stderr=True)


def _print_line(text: str) -> None:
    """Write a plain line to stdout, without rich markup or wrapping."""
    console.print(text, markup=False, highlight=False, emoji=False, soft_wrap=True)


@app.callback()
def main():
    """Rank open-source packages by the trustworthiness of their repositories."""
    configure_logging()


@app.command()
def url(
    url_file: Path = typer.Argument(
        ...,
        help="File with one GitHub repository or npm package URL per line.",
    ),
    timeout: float | None = typer.Option(
        None,
        "--timeout",
        "-t",
        help="Seconds allowed to score a single URL (default: 120).",
    ),
    max_workers: int | None = typer.Option(
        None,
        "--max-workers",
        help="Metrics computed concurrently per URL (default: 5).",
    ),
    insecure: bool = typer.Option(
        False,
        "--insecure",
        help="Disable SSL certificate verification for HTTPS requests.",
    ),
):
    """Print modules in order of trustworthiness."""
    set_verify_ssl(not insecure)
    if timeout is not None:
        set_timeout(timeout)
    if max_workers is not None:
        set_max_workers(max_workers)

    try:
        urls = read_source_urls(url_file)
    except (OSError, UnicodeDecodeError) as e:
        err_console.print(f"[red]Unable to read {escape(str(url_file))}: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from None
    except InvalidSourceError as e:
        err_console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(code=1) from None

    try:
        records = analyze_sources(urls)
    except ValueError as e:
        err_console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(code=1) from None
    finally:
        close_http_client()

    for record in records:
        _print_line(format_record(record))


@app.command()
def report(
    test_result: Path = typer.Argument(
        ..., help="Test result file (one `ok ...` / `not ok ...` line per test)."
    ),
    line_analysis: Path = typer.Argument(
        ..., help="JSON coverage export with data[0].totals.lines.percent."
    ),
):
    """Parse results of tests."""
    try:
        summary = parse_test_results(test_result)
        coverage = parse_line_coverage(line_analysis)
    except (OSError, ValueError) as e:
        err_console.print(f"[yellow]⚠️  {escape(str(e))}[/yellow]")
        raise typer.Exit(code=1) from None

    _print_line(format_summary(summary, coverage))


if __name__ == "__main__":
    app()
