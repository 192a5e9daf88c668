"""JSON, CSV and console renderings of the results, and format dispatch."""

import json
import logging
from pathlib import Path
from typing import Optional, Sequence, Union

from rich.console import Console
from rich.table import Table

from .config import REPORT_FORMATS
from .data_loader import results_to_dataframe
from .errors import UnsupportedFormatError
from .html_report import generate_html_report
from .i18n import DEFAULT_LANGUAGE
from .models import BenchmarkResult
from .summary import build_row

logger = logging.getLogger(__name__)


def generate_json_report(results: Sequence[BenchmarkResult], filename: Union[str, Path]) -> Path:
    """Write results in the same shape the loader reads back."""
    path = Path(filename)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = {"test_results": [r.to_dict() for r in results]}
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
    return path


def generate_csv_report(results: Sequence[BenchmarkResult], filename: Union[str, Path]) -> Path:
    """Write one CSV row per result. Durations are in milliseconds."""
    path = Path(filename)
    path.parent.mkdir(parents=True, exist_ok=True)
    df = results_to_dataframe(list(results))
    df.to_csv(path, index=False, float_format="%.2f")
    return path


def build_console_table(results: Sequence[BenchmarkResult]) -> Table:
    """Build a rich table comparing all concurrency levels."""
    table = Table(title="Concurrent Test Comparison")
    headers = [
        "Thread", "Reqs", "Dur(s)", "QPS", "Toks/s",
        "Avg", "P50", "P90", "P99",
        "1stAvg", "1stP50", "1stP90", "1stP99",
        "ReqToks", "ResToks",
    ]
    for header in headers:
        table.add_column(header, justify="right", style="cyan" if header == "Thread" else None)

    for result in results:
        row = build_row(result)
        requests = row.requests
        if result.metrics.failed_requests > 0:
            requests = f"[red]{requests}[/red]"
        table.add_row(
            str(row.concurrency),
            requests,
            row.duration,
            row.qps,
            row.tokens_per_sec,
            *row.latency,
            *row.first_token_latency,
            row.request_tokens,
            row.response_tokens,
        )
    return table


def print_console_table(results: Sequence[BenchmarkResult], console: Optional[Console] = None) -> None:
    console = console or Console()
    if not results:
        console.print("No test results available.")
        return
    console.print(build_console_table(results))


def generate_file_report(
    results: Sequence[BenchmarkResult],
    report_file: Union[str, Path],
    report_format: str,
    lang: str = DEFAULT_LANGUAGE,
    offline: bool = False,
) -> Path:
    """
    Write a report in the requested format.

    The format extension is appended to report_file when missing.

    Args:
        results: Benchmark results
        report_file: Output path
        report_format: One of json, csv, html
        lang: Initial language of the HTML report
        offline: Embed plotly.js in the HTML report

    Returns:
        Path of the written file

    Raises:
        UnsupportedFormatError: for any other format
    """
    report_format = report_format.lower()
    if report_format not in REPORT_FORMATS:
        raise UnsupportedFormatError(report_format)

    path = Path(report_file)
    if path.suffix.lower() != f".{report_format}":
        path = path.with_name(f"{path.name}.{report_format}")

    if report_format == "json":
        generate_json_report(results, path)
    elif report_format == "csv":
        generate_csv_report(results, path)
    else:
        generate_html_report(results, path, lang=lang, offline=offline)

    logger.info("%s report generated: %s", report_format.upper(), path)
    return path
