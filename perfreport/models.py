"""Benchmark result records consumed by the report."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from .errors import MalformedInputError

# Wire names of the duration fields (milliseconds) mapped to attribute names
_DURATION_FIELDS = {
    "total_duration": "total_duration_ms",
    "average_latency": "average_latency_ms",
    "latency_p50": "latency_p50_ms",
    "latency_p90": "latency_p90_ms",
    "latency_p99": "latency_p99_ms",
    "average_first_token_latency": "average_first_token_latency_ms",
    "first_token_latency_p50": "first_token_latency_p50_ms",
    "first_token_latency_p90": "first_token_latency_p90_ms",
    "first_token_latency_p99": "first_token_latency_p99_ms",
}

_COUNT_FIELDS = ["total_requests", "successful_requests", "failed_requests", "total_tokens"]
_RATE_FIELDS = ["success_rate", "average_request_tokens", "average_response_tokens"]


@dataclass(frozen=True)
class Metrics:
    """Pre-computed metrics of one benchmark run.

    ``qps`` and ``tokens_per_second`` are None when the producer left them out;
    the series builder refuses such records.
    """
    qps: Optional[float] = None
    tokens_per_second: Optional[float] = None
    total_requests: int = 0
    successful_requests: int = 0
    failed_requests: int = 0
    success_rate: float = 0.0
    total_duration_ms: float = 0.0
    average_latency_ms: float = 0.0
    latency_p50_ms: float = 0.0
    latency_p90_ms: float = 0.0
    latency_p99_ms: float = 0.0
    total_tokens: int = 0
    average_request_tokens: float = 0.0
    average_response_tokens: float = 0.0
    average_first_token_latency_ms: float = 0.0
    first_token_latency_p50_ms: float = 0.0
    first_token_latency_p90_ms: float = 0.0
    first_token_latency_p99_ms: float = 0.0
    error_counts: Dict[str, int] = field(default_factory=dict)
    error_type_counts: Dict[str, int] = field(default_factory=dict)

    @property
    def error_rate(self) -> float:
        """Failed requests as a percentage of all requests."""
        if self.total_requests == 0:
            return 0.0
        return self.failed_requests / self.total_requests * 100

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Metrics":
        tokens = data.get("tokens_per_second", data.get("tokensPerSecond"))
        kwargs: Dict[str, Any] = {
            "qps": float(data["qps"]) if data.get("qps") is not None else None,
            "tokens_per_second": float(tokens) if tokens is not None else None,
        }
        for name in _COUNT_FIELDS:
            kwargs[name] = int(data.get(name) or 0)
        for name in _RATE_FIELDS:
            kwargs[name] = float(data.get(name) or 0.0)
        for wire_name, attr in _DURATION_FIELDS.items():
            kwargs[attr] = float(data.get(wire_name) or 0.0)
        kwargs["error_counts"] = dict(data.get("error_counts") or {})
        kwargs["error_type_counts"] = dict(data.get("error_type_counts") or {})
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "qps": self.qps,
            "tokens_per_second": self.tokens_per_second,
        }
        for name in _COUNT_FIELDS + _RATE_FIELDS:
            data[name] = getattr(self, name)
        for wire_name, attr in _DURATION_FIELDS.items():
            data[wire_name] = getattr(self, attr)
        data["error_counts"] = dict(self.error_counts)
        if self.error_type_counts:
            data["error_type_counts"] = dict(self.error_type_counts)
        return data


@dataclass(frozen=True)
class BenchmarkResult:
    """Metrics of a benchmark run at one concurrency level."""
    concurrency: int
    metrics: Optional[Metrics]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], index: int = 0) -> "BenchmarkResult":
        """
        Parse one record of a results file.

        Args:
            data: Record with ``concurrency`` and ``metrics`` keys
            index: Position of the record, reported on error

        Returns:
            Parsed BenchmarkResult

        Raises:
            MalformedInputError: if the record is not an object, or concurrency
                or metrics are absent
        """
        if not isinstance(data, Mapping):
            raise MalformedInputError(index, "record")
        if data.get("concurrency") is None:
            raise MalformedInputError(index, "concurrency")
        metrics = data.get("metrics")
        if not isinstance(metrics, Mapping):
            raise MalformedInputError(index, "metrics")
        return cls(concurrency=int(data["concurrency"]), metrics=Metrics.from_dict(metrics))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "concurrency": self.concurrency,
            "metrics": self.metrics.to_dict() if self.metrics is not None else None,
        }


def parse_results(records: List[Mapping[str, Any]]) -> List[BenchmarkResult]:
    """Parse a list of raw records, keeping their order."""
    return [BenchmarkResult.from_dict(record, index) for index, record in enumerate(records)]
