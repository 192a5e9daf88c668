"""Projection of benchmark results into chart series."""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import List, Sequence, Tuple

from .config import QPS_DECIMALS, TOKENS_DECIMALS
from .errors import MalformedInputError
from .models import BenchmarkResult


def format_fixed(value: float, decimals: int) -> str:
    """Format a number with a fixed number of decimals, rounding half up.

    Rounds the shortest decimal form of the float, so 100.25 gives "100.3"
    rather than the "100.2" that binary rounding produces.
    """
    quantum = Decimal(1).scaleb(-decimals)
    return str(Decimal(repr(float(value))).quantize(quantum, rounding=ROUND_HALF_UP))


def format_qps(value: float) -> str:
    return format_fixed(value, QPS_DECIMALS)


def format_tokens(value: float) -> str:
    return format_fixed(value, TOKENS_DECIMALS)


@dataclass(frozen=True)
class ChartSeries:
    """Index-aligned category and value sequences for the dual-axis chart."""
    categories: Tuple[int, ...]
    primary_series: Tuple[float, ...]
    secondary_series: Tuple[float, ...]

    def __len__(self) -> int:
        return len(self.categories)

    def primary_labels(self) -> List[str]:
        """QPS values formatted for display."""
        return [format_qps(v) for v in self.primary_series]

    def secondary_labels(self) -> List[str]:
        """Tokens/sec values formatted for display."""
        return [format_tokens(v) for v in self.secondary_series]


def build_series(results: Sequence[BenchmarkResult]) -> ChartSeries:
    """
    Build chart series from benchmark results.

    Args:
        results: Results in the order they should appear on the x axis

    Returns:
        ChartSeries with one point per result

    Raises:
        MalformedInputError: if a result lacks qps or tokens_per_second
    """
    categories = []
    primary = []
    secondary = []

    for index, result in enumerate(results):
        if result.concurrency is None:
            raise MalformedInputError(index, "concurrency")
        metrics = result.metrics
        if metrics is None:
            raise MalformedInputError(index, "metrics")
        if metrics.qps is None:
            raise MalformedInputError(index, "metrics.qps")
        if metrics.tokens_per_second is None:
            raise MalformedInputError(index, "metrics.tokens_per_second")

        categories.append(result.concurrency)
        primary.append(metrics.qps)
        secondary.append(metrics.tokens_per_second)

    return ChartSeries(
        categories=tuple(categories),
        primary_series=tuple(primary),
        secondary_series=tuple(secondary),
    )
