"""Best-of rankings, bottleneck detection and the concurrency recommendation.

All inputs are pre-computed metrics; nothing here aggregates raw samples.
"""

import math
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from .config import LATENCY_RATIO_THRESHOLD, QPS_GRADIENT_THRESHOLD
from .models import BenchmarkResult


@dataclass
class BottleneckResult:
    """Outcome of a bottleneck check or of the recommendation."""
    concurrency: Optional[int] = None
    qps: float = 0.0
    tokens_per_sec: float = 0.0
    average_latency_ms: float = 0.0
    is_bottleneck: bool = False
    algorithm: str = ""
    reason: str = ""
    reason_key: str = ""

    @classmethod
    def from_result(cls, result: BenchmarkResult, algorithm: str,
                    is_bottleneck: bool = False, latency_ms: Optional[float] = None) -> "BottleneckResult":
        metrics = result.metrics
        return cls(
            concurrency=result.concurrency,
            qps=metrics.qps or 0.0,
            tokens_per_sec=metrics.tokens_per_second or 0.0,
            average_latency_ms=metrics.average_latency_ms if latency_ms is None else latency_ms,
            is_bottleneck=is_bottleneck,
            algorithm=algorithm,
        )


def _sorted_by_concurrency(results: Sequence[BenchmarkResult]) -> List[BenchmarkResult]:
    return sorted(results, key=lambda r: r.concurrency)


def _best(results: Sequence[BenchmarkResult], value: Callable[[BenchmarkResult], float],
          lowest: bool = False, skip_zero: bool = False) -> Optional[BenchmarkResult]:
    """Pick the result with the best value; ties go to the higher concurrency."""
    best = None
    for result in results:
        current = value(result)
        if skip_zero and current == 0:
            continue
        if best is None:
            best = result
            continue
        best_value = value(best)
        better = current < best_value if lowest else current > best_value
        if better or (current == best_value and result.concurrency > best.concurrency):
            best = result
    return best


def best_qps(results: Sequence[BenchmarkResult]) -> Optional[BenchmarkResult]:
    return _best(results, lambda r: r.metrics.qps or 0.0)


def best_tokens_throughput(results: Sequence[BenchmarkResult]) -> Optional[BenchmarkResult]:
    return _best(results, lambda r: r.metrics.tokens_per_second or 0.0)


def best_latency(results: Sequence[BenchmarkResult]) -> Optional[BenchmarkResult]:
    """Lowest average end-to-end latency, ignoring runs that report none."""
    return _best(results, lambda r: r.metrics.average_latency_ms, lowest=True, skip_zero=True)


def best_first_token_latency(results: Sequence[BenchmarkResult]) -> Optional[BenchmarkResult]:
    return _best(results, lambda r: r.metrics.average_first_token_latency_ms,
                 lowest=True, skip_zero=True)


def best_success_rate(results: Sequence[BenchmarkResult]) -> Optional[BenchmarkResult]:
    return _best(results, lambda r: r.metrics.success_rate)


class GradientBasedDetector:
    """Flags the level after which QPS grows by less than ``threshold`` per added client."""

    name = "GradientBased"

    def __init__(self, threshold: float = QPS_GRADIENT_THRESHOLD):
        self.threshold = threshold

    def detect(self, results: Sequence[BenchmarkResult]) -> BottleneckResult:
        if not results:
            return BottleneckResult(algorithm=self.name)
        if len(results) == 1:
            return BottleneckResult.from_result(results[0], self.name)

        ordered = _sorted_by_concurrency(results)
        for prev, curr in zip(ordered, ordered[1:]):
            if prev.metrics.successful_requests == 0 or curr.metrics.successful_requests == 0:
                continue
            concurrency_diff = curr.concurrency - prev.concurrency
            if concurrency_diff == 0:
                continue

            gradient = ((curr.metrics.qps or 0.0) - (prev.metrics.qps or 0.0)) / concurrency_diff
            if gradient < self.threshold:
                return BottleneckResult.from_result(prev, self.name, is_bottleneck=True)

        return BottleneckResult.from_result(ordered[-1], self.name)


class StatisticalBasedDetector:
    """Flags the start of the first window whose QPS coefficient of variation is below ``threshold``."""

    name = "StatisticalBased"

    def __init__(self, window_size: int = 3, threshold: float = 0.05):
        self.window_size = window_size
        self.threshold = threshold

    def detect(self, results: Sequence[BenchmarkResult]) -> BottleneckResult:
        if len(results) < self.window_size:
            return BottleneckResult(algorithm=self.name)

        ordered = _sorted_by_concurrency(results)
        qps_values = [r.metrics.qps or 0.0 for r in ordered]

        for end in range(self.window_size, len(qps_values)):
            window = qps_values[end - self.window_size:end]
            mean = sum(window) / self.window_size
            if mean == 0:
                continue
            std_dev = math.sqrt(sum((v - mean) ** 2 for v in window) / self.window_size)
            if std_dev / mean < self.threshold:
                return BottleneckResult.from_result(
                    ordered[end - self.window_size], self.name, is_bottleneck=True)

        return BottleneckResult.from_result(ordered[-1], self.name)


class LatencyBasedDetector:
    """
    Flags the level after which latency grows faster than concurrency.

    The ratio compared with ``threshold`` is the relative latency growth
    divided by the relative concurrency growth between neighbouring levels.
    """

    name = "LatencyBased"

    def __init__(self, threshold: float = LATENCY_RATIO_THRESHOLD, use_first_token_latency: bool = False):
        self.threshold = threshold
        self.use_first_token_latency = use_first_token_latency

    def _latency(self, result: BenchmarkResult) -> float:
        if self.use_first_token_latency:
            return result.metrics.average_first_token_latency_ms
        return result.metrics.average_latency_ms

    def detect(self, results: Sequence[BenchmarkResult]) -> BottleneckResult:
        if not results:
            return BottleneckResult(algorithm=self.name)
        if len(results) == 1:
            return BottleneckResult.from_result(results[0], self.name, latency_ms=self._latency(results[0]))

        ordered = _sorted_by_concurrency(results)
        for prev, curr in zip(ordered, ordered[1:]):
            if prev.metrics.successful_requests == 0 or curr.metrics.successful_requests == 0:
                continue
            prev_latency = self._latency(prev)
            curr_latency = self._latency(curr)
            if prev_latency == 0 or curr_latency == 0:
                continue
            concurrency_diff = curr.concurrency - prev.concurrency
            if concurrency_diff == 0:
                continue

            ratio = ((curr_latency - prev_latency) / prev_latency) / (concurrency_diff / prev.concurrency)
            if ratio > self.threshold:
                return BottleneckResult.from_result(prev, self.name, is_bottleneck=True, latency_ms=prev_latency)

        last = ordered[-1]
        return BottleneckResult.from_result(last, self.name, latency_ms=self._latency(last))


def detect_qps_bottleneck(results: Sequence[BenchmarkResult]) -> BottleneckResult:
    return GradientBasedDetector().detect(results)


def detect_latency_bottleneck(results: Sequence[BenchmarkResult]) -> BottleneckResult:
    return LatencyBasedDetector().detect(results)


def detect_first_token_latency_bottleneck(results: Sequence[BenchmarkResult]) -> BottleneckResult:
    return LatencyBasedDetector(use_first_token_latency=True).detect(results)


def _adopt(recommended: BottleneckResult, source: BottleneckResult) -> None:
    recommended.concurrency = source.concurrency
    recommended.qps = source.qps
    recommended.tokens_per_sec = source.tokens_per_sec
    recommended.average_latency_ms = source.average_latency_ms


def recommend_concurrency(results: Sequence[BenchmarkResult]) -> BottleneckResult:
    """
    Recommend a concurrency level from the QPS and latency trends.

    If a bottleneck is detected the recommendation is the lowest bottleneck
    level. Otherwise it is the level with the best QPS, with the reason noting
    whether it also wins on token throughput or latency.

    Args:
        results: Benchmark results in any order

    Returns:
        BottleneckResult with the recommended level and an explanation
    """
    algorithm = "RecommendedConcurrency"

    if not results:
        return BottleneckResult(algorithm=algorithm, reason="No results to analyze.",
                                reason_key="reasonNoData")

    if len(results) == 1:
        recommended = BottleneckResult.from_result(results[0], algorithm)
        recommended.reason = "Only one concurrency level tested."
        recommended.reason_key = "reasonSingleLevel"
        return recommended

    qps_bottleneck = detect_qps_bottleneck(results)
    latency_bottleneck = detect_latency_bottleneck(results)
    top_qps = best_qps(results)
    top_tokens = best_tokens_throughput(results)
    top_latency = best_latency(results)

    recommended = BottleneckResult.from_result(top_qps, algorithm)

    if qps_bottleneck.is_bottleneck and latency_bottleneck.is_bottleneck:
        if qps_bottleneck.concurrency <= latency_bottleneck.concurrency:
            _adopt(recommended, qps_bottleneck)
            recommended.reason = (f"QPS bottleneck detected at concurrency {qps_bottleneck.concurrency}. "
                                  "Recommend staying below this level for optimal performance.")
            recommended.reason_key = "reasonQpsBottleneck"
        else:
            _adopt(recommended, latency_bottleneck)
            recommended.reason = (f"Latency bottleneck detected at concurrency {latency_bottleneck.concurrency}. "
                                  "Recommend staying below this level to maintain low latency.")
            recommended.reason_key = "reasonLatencyBottleneck"
    elif qps_bottleneck.is_bottleneck:
        _adopt(recommended, qps_bottleneck)
        total_requests = next(
            (r.metrics.total_requests for r in results if r.concurrency == qps_bottleneck.concurrency), 0)
        # Too few requests per client to trust the plateau
        if 0 < total_requests <= qps_bottleneck.concurrency * 2:
            recommended.reason = (f"QPS bottleneck detected at concurrency {qps_bottleneck.concurrency}, "
                                  f"but only {total_requests} requests were processed. This may indicate "
                                  "the bottleneck is not genuine - consider running longer tests to confirm.")
            recommended.reason_key = "reasonQpsBottleneckShortRun"
        else:
            recommended.reason = (f"QPS bottleneck detected at concurrency {qps_bottleneck.concurrency}. "
                                  "Recommend staying below this level for optimal throughput.")
            recommended.reason_key = "reasonQpsBottleneck"
    elif latency_bottleneck.is_bottleneck:
        _adopt(recommended, latency_bottleneck)
        recommended.reason = (f"Latency bottleneck detected at concurrency {latency_bottleneck.concurrency}. "
                              "Recommend staying below this level to maintain low latency.")
        recommended.reason_key = "reasonLatencyBottleneck"
    elif top_tokens.concurrency == top_qps.concurrency:
        recommended.reason = (f"Optimal concurrency {top_qps.concurrency} maximizes both QPS "
                              "and token throughput.")
        recommended.reason_key = "reasonBestOverall"
    elif (top_latency is not None and top_latency.concurrency <= top_qps.concurrency
          and top_latency.concurrency <= top_tokens.concurrency):
        recommended.reason = (f"Recommended concurrency {top_qps.concurrency} for balanced performance "
                              "between QPS and latency.")
        recommended.reason_key = "reasonBalanced"
    else:
        recommended.reason = f"Recommended concurrency {top_qps.concurrency} for maximum QPS."
        recommended.reason_key = "reasonMaxQps"

    return recommended
