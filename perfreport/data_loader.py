"""Loading of benchmark results produced by the load tester."""

import json
import logging
from pathlib import Path
from typing import Any, List, Union

import pandas as pd

from .models import BenchmarkResult, parse_results

logger = logging.getLogger(__name__)

# Column order of the CSV report
CSV_COLUMNS = [
    "concurrency",
    "total_requests",
    "successful_requests",
    "failed_requests",
    "success_rate",
    "qps",
    "tokens_per_second",
    "average_latency",
    "latency_p50",
    "latency_p90",
    "latency_p99",
    "average_request_tokens",
    "average_response_tokens",
    "average_first_token_latency",
    "first_token_latency_p50",
    "first_token_latency_p90",
    "first_token_latency_p99",
]


def _records(data: Any) -> List[dict]:
    """Extract result records from a decoded results document."""
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        if "test_results" in data:
            records = data["test_results"] or []
            if not isinstance(records, list):
                raise ValueError("'test_results' must be a list of results")
            return records
        if "concurrency" in data:
            return [data]
    raise ValueError("Expected a list of results or an object with 'test_results'")


def get_result_files(results_dir: Union[str, Path]) -> List[Path]:
    """
    Get all JSON result files of a results directory.

    Args:
        results_dir: Directory holding one JSON file per run

    Returns:
        Sorted list of file paths
    """
    results_path = Path(results_dir)
    if not results_path.is_dir():
        return []
    return sorted(results_path.glob("*.json"))


def load_results_file(path: Union[str, Path]) -> List[BenchmarkResult]:
    """
    Load results from a JSON report file.

    Args:
        path: File written by the JSON report (``{"test_results": [...]}``)
            or holding a bare list of results

    Returns:
        Results in file order

    Raises:
        MalformedInputError: if a record lacks concurrency or metrics
    """
    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)
    results = parse_results(_records(data))
    logger.debug("Loaded %d results from %s", len(results), path)
    return results


def load_results_dir(results_dir: Union[str, Path]) -> List[BenchmarkResult]:
    """
    Load results from a directory of per-run JSON files.

    Files that cannot be decoded are skipped. The combined results are
    ordered by ascending concurrency.
    """
    records = []
    for json_file in get_result_files(results_dir):
        try:
            with open(json_file, 'r', encoding='utf-8') as f:
                records.extend(_records(json.load(f)))
        except (OSError, ValueError) as e:
            logger.warning("Error loading %s: %s", json_file, e)

    results = parse_results(records)
    return sorted(results, key=lambda r: r.concurrency)


def load_results(path: Union[str, Path]) -> List[BenchmarkResult]:
    """Load results from a JSON file or a directory of JSON files."""
    if Path(path).is_dir():
        return load_results_dir(path)
    return load_results_file(path)


def results_to_dataframe(results: List[BenchmarkResult]) -> pd.DataFrame:
    """
    Flatten results into a DataFrame with the CSV report columns.

    Durations stay in milliseconds.
    """
    rows = []
    for result in results:
        row = {"concurrency": result.concurrency}
        row.update(result.metrics.to_dict())
        rows.append(row)

    if not rows:
        return pd.DataFrame(columns=CSV_COLUMNS)
    return pd.DataFrame(rows)[CSV_COLUMNS]
