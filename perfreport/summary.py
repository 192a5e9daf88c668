"""Text summary model shared by the HTML report and the web UI."""

from collections import Counter
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from .analysis import (
    BottleneckResult,
    best_qps,
    best_tokens_throughput,
    detect_latency_bottleneck,
    recommend_concurrency,
)
from .i18n import DEFAULT_LANGUAGE, TRANSLATIONS
from .models import BenchmarkResult
from .series import format_fixed, format_qps, format_tokens


def default_text(key: str) -> str:
    """Authored (default language) text for a phrase key."""
    return TRANSLATIONS[DEFAULT_LANGUAGE].get(key, key)


@dataclass
class SummaryCard:
    """One highlight box of the summary: a headline, a value and its concurrency."""
    title_key: str
    subtitle_key: str
    value: Optional[str] = None
    concurrency: Optional[int] = None
    status_key: Optional[str] = None
    reason_key: Optional[str] = None


@dataclass
class ComparisonRow:
    """Display-formatted metrics of one run in the detailed comparison table."""
    concurrency: int
    requests: str
    duration: str
    qps: str
    tokens_per_sec: str
    latency: Tuple[str, str, str, str]
    first_token_latency: Tuple[str, str, str, str]
    request_tokens: str
    response_tokens: str
    success_rate: str
    error_rate: str


@dataclass
class ReportSummary:
    cards: List[SummaryCard] = field(default_factory=list)
    rows: List[ComparisonRow] = field(default_factory=list)
    error_types: List[Tuple[str, int]] = field(default_factory=list)
    recommendation: BottleneckResult = field(default_factory=BottleneckResult)

    @property
    def has_errors(self) -> bool:
        return bool(self.error_types)


def _ms(value: float) -> str:
    return format_fixed(value, 0)


def build_row(result: BenchmarkResult) -> ComparisonRow:
    m = result.metrics
    requests = str(m.total_requests)
    if m.failed_requests > 0:
        requests = f"{m.successful_requests}/{m.total_requests}"

    return ComparisonRow(
        concurrency=result.concurrency,
        requests=requests,
        duration=format_fixed(m.total_duration_ms / 1000, 2),
        qps=format_qps(m.qps),
        tokens_per_sec=format_tokens(m.tokens_per_second),
        latency=(_ms(m.average_latency_ms), _ms(m.latency_p50_ms),
                 _ms(m.latency_p90_ms), _ms(m.latency_p99_ms)),
        first_token_latency=(_ms(m.average_first_token_latency_ms), _ms(m.first_token_latency_p50_ms),
                             _ms(m.first_token_latency_p90_ms), _ms(m.first_token_latency_p99_ms)),
        request_tokens=format_fixed(m.average_request_tokens, 1),
        response_tokens=format_fixed(m.average_response_tokens, 1),
        success_rate=format_fixed(m.success_rate, 2),
        error_rate=format_fixed(m.error_rate, 2),
    )


def collect_error_types(results: Sequence[BenchmarkResult]) -> List[Tuple[str, int]]:
    """Error counts summed over all runs, most frequent first."""
    totals = Counter()
    for result in results:
        counts = result.metrics.error_type_counts or result.metrics.error_counts
        totals.update(counts)
    return [(name, count) for name, count in totals.most_common() if count > 0]


def build_summary(results: Sequence[BenchmarkResult]) -> ReportSummary:
    """
    Build the report summary.

    Results must already be validated (see build_series); their order is kept
    for the detailed comparison table.
    """
    top_qps = best_qps(results)
    top_tokens = best_tokens_throughput(results)
    latency_bottleneck = detect_latency_bottleneck(results)
    recommendation = recommend_concurrency(results)

    cards = []

    if top_qps is None:
        cards.append(SummaryCard("bestPerformance", "highestQPS", status_key="noDataAvailable"))
        cards.append(SummaryCard("bestThroughput", "highestTokensPerSecond", status_key="noDataAvailable"))
        cards.append(SummaryCard("e2eLatencyBottleneck", "bottleneckDetected", status_key="noDataAvailable"))
    else:
        cards.append(SummaryCard("bestPerformance", "highestQPS",
                                 value=format_qps(top_qps.metrics.qps),
                                 concurrency=top_qps.concurrency))
        cards.append(SummaryCard("bestThroughput", "highestTokensPerSecond",
                                 value=format_tokens(top_tokens.metrics.tokens_per_second),
                                 concurrency=top_tokens.concurrency))
        if latency_bottleneck.is_bottleneck:
            cards.append(SummaryCard("e2eLatencyBottleneck", "bottleneckDetected",
                                     value=f"{_ms(latency_bottleneck.average_latency_ms)} ms",
                                     concurrency=latency_bottleneck.concurrency))
        else:
            cards.append(SummaryCard("e2eLatencyBottleneck", "bottleneckDetected",
                                     status_key="noBottleneck"))

    cards.append(SummaryCard(
        "recommended", "optimalConcurrency",
        value=str(recommendation.concurrency) if recommendation.concurrency is not None else None,
        concurrency=recommendation.concurrency,
        status_key=None if recommendation.concurrency is not None else "noDataAvailable",
        reason_key=recommendation.reason_key or None,
    ))

    return ReportSummary(
        cards=cards,
        rows=[build_row(r) for r in results],
        error_types=collect_error_types(results),
        recommendation=recommendation,
    )
