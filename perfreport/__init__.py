"""Performance report generation for concurrency benchmarks."""

from .chart import build_chart, configure_chart
from .data_loader import load_results
from .errors import MalformedInputError, ReportError, UnsupportedFormatError, UnsupportedLocaleError
from .i18n import LocaleState, LocalizationSwitcher
from .models import BenchmarkResult, Metrics
from .series import ChartSeries, build_series

__all__ = [
    "BenchmarkResult",
    "Metrics",
    "ChartSeries",
    "build_series",
    "configure_chart",
    "build_chart",
    "load_results",
    "LocaleState",
    "LocalizationSwitcher",
    "ReportError",
    "MalformedInputError",
    "UnsupportedLocaleError",
    "UnsupportedFormatError",
]
